"""
Общие утилиты, константы и логгер.
"""

from geo_relay.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from geo_relay.common.constants import TypeMsg, RelayEvent

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
    "RelayEvent",
]
