"""
Configuration for KatalonKit build steps.
"""

from .step import StepConfig, ConfigError, load_step_config

__all__ = [
    "StepConfig",
    "ConfigError",
    "load_step_config",
]
