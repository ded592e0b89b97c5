"""
Trigger Runner module.

Configuration, the trigger flow itself, and the ci-trigger command line
entry point.
"""

from .config import ConfigError, TriggerConfig, load_config
from .flow import is_recent, run_trigger_flow

__all__ = [
    "ConfigError",
    "TriggerConfig",
    "is_recent",
    "load_config",
    "run_trigger_flow",
]
