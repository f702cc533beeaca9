"""
Общие модели протокола relay.
"""
