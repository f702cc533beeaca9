"""
Сервисы relay.
"""
