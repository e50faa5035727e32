"""
Configuration module for the labor cost tracker.
"""
from .logging_config import JSONFormatter, LoggingConfig, configure_logging, reset_logging
from .settings import LaborCostConfig, get_config, load_config, reload_config

__all__ = [
    'LaborCostConfig',
    'get_config',
    'load_config',
    'reload_config',
    'LoggingConfig',
    'JSONFormatter',
    'configure_logging',
    'reset_logging',
]
