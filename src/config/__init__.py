"""
Configuration module for the billing core.
"""
from .settings import (
    BillingCoreConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'BillingCoreConfig',
    'get_config',
    'load_config',
    'reload_config'
]
