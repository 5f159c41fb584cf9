"""Config subpackage - settings and logging setup."""
from .settings import Settings, get_settings, reset_settings
from .logging_config import configure_logging

__all__ = ['Settings', 'get_settings', 'reset_settings', 'configure_logging']
