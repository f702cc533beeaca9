"""
Реестр подключённых клиентов и их последних координат.
"""

from geo_relay.core.registry.service import ClientRecord, ClientRegistry

__all__ = ["ClientRecord", "ClientRegistry"]
