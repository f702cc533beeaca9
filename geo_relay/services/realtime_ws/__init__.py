"""
Realtime WebSocket relay — сервис обмена геолокацией.

Обеспечивает:
- WebSocket соединения для клиентов
- Рассылку позиций всем подключённым клиентам
- Пересчёт попарных расстояний при каждом изменении
- REST API для опроса расстояний и здоровья
"""
