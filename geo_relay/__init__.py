"""
geo_relay — relay для обмена геолокацией в реальном времени.
"""

__version__ = "1.0.0"
