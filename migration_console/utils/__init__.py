"""
Utility modules for the migration console
"""
from .config_loader import ConsoleConfig, load_console_config

__all__ = [
    'ConsoleConfig',
    'load_console_config',
]
