"""
Ядро relay: геоматематика, реестр клиентов, агрегатор расстояний.
"""
