"""Build step configuration for KatalonKit.

A ``StepConfig`` is the parameter bundle a build host hands to the core:
which Katalon Studio to use, which project to run and how to run it.
The core treats it as opaque data; hosts build it from their own settings,
and the bundled CLI can seed it from a small YAML file.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from katalonkit.core.exceptions import KatalonKitError

# Key spellings used by existing build job definitions
_CAMEL_CASE_KEYS = {
    "projectPath": "project_path",
    "executeArgs": "execute_args",
    "x11Display": "x11_display",
    "xvfbConfiguration": "xvfb_configuration",
}


class ConfigError(KatalonKitError, ValueError):
    """Step configuration is invalid."""

    pass


@dataclass
class StepConfig:
    """Parameters of one Katalon Studio build step."""

    version: str = ""
    location: str = ""  # pre-installed package root; skips download when set
    project_path: str = ""
    execute_args: str = ""
    x11_display: str = ""
    xvfb_configuration: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], validate: bool = True) -> "StepConfig":
        """
        Build a StepConfig from a mapping.

        Accepts snake_case and camelCase keys; unknown keys are ignored.
        ``None`` values become empty strings.

        Args:
            data: Settings mapping
            validate: Whether to require a version or a location

        Raises:
            ConfigError: If data is not a mapping, or if validating and both
                version and location are blank
        """
        if not isinstance(data, dict):
            raise ConfigError("Step configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                values[name] = "" if value is None else str(value)

        config = cls(**values)
        if validate:
            config.validate()
        return config

    def validate(self) -> None:
        """
        Check that the step can locate a Katalon Studio package.

        Raises:
            ConfigError: If both version and location are blank
        """
        if not self.version.strip() and not self.location.strip():
            raise ConfigError(
                "Either a Katalon Studio version or a pre-installed location is required"
            )

    def merged(self, overrides: Dict[str, Optional[str]]) -> "StepConfig":
        """
        Return a copy with non-None overrides applied.

        Raises:
            ConfigError: If the result has neither version nor location
        """
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if value is not None and key in values:
                values[key] = value
        config = StepConfig(**values)
        config.validate()
        return config


def load_step_config(config_path: Path) -> Dict[str, Any]:
    """
    Read raw step settings from a YAML file.

    The file may hold the settings at the top level or under a
    ``katalon`` key.

    Args:
        config_path: Path to the YAML file

    Returns:
        Settings mapping (not validated)

    Raises:
        ConfigError: If the file is missing or is not a YAML mapping
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {config_path}")

    section = data.get("katalon", data)
    if not isinstance(section, dict):
        raise ConfigError("The 'katalon' section must be a mapping")
    return section
