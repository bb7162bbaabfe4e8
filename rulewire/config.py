"""
Config system - typed validation settings with layered loading.

Merge order (later overrides earlier):
1. Dataclass defaults
2. ``.env`` file (``RULEWIRE_*`` keys only)
3. Environment variables (``RULEWIRE_*`` prefix)
4. Manual overrides
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, fields
from pathlib import Path
import logging
import os

from dotenv import dotenv_values

from .faults import ConfigInvalidFault

logger = logging.getLogger("rulewire.config")

CASCADE_MODES = ("continue", "stop")


@dataclass(frozen=True)
class ValidationConfig:
    """
    Settings shared by every validator of an application.

    Attributes:
        cascade_mode: ``"continue"`` runs every component of a rule,
            ``"stop"`` ends a rule at its first failure.
        raise_on_failure: Make ``integration.validate()`` raise
            ``ValidationFault`` instead of returning an invalid result.
        rule_set_separator: Separator used when rule sets are given as a
            single string (``"Create,Update"``).
    """

    cascade_mode: str = "continue"
    raise_on_failure: bool = False
    rule_set_separator: str = ","

    def __post_init__(self):
        if not isinstance(self.raise_on_failure, bool):
            raise ConfigInvalidFault(
                "raise_on_failure", f"expected a boolean, got {self.raise_on_failure!r}"
            )
        if self.cascade_mode not in CASCADE_MODES:
            raise ConfigInvalidFault(
                "cascade_mode",
                f"expected one of {', '.join(CASCADE_MODES)}, got {self.cascade_mode!r}",
            )
        if not self.rule_set_separator:
            raise ConfigInvalidFault("rule_set_separator", "must not be empty")

    def split_rule_sets(self, value: Any) -> tuple[str, ...]:
        """Normalise a rule-set argument (string, iterable or None) to a tuple of names."""
        if value is None:
            return ()
        if isinstance(value, str):
            value = (value,)
        names = []
        for item in value:
            names.extend(part.strip() for part in item.split(self.rule_set_separator))
        return tuple(name for name in names if name)


DEFAULT_CONFIG = ValidationConfig()

_FIELD_TYPES = {f.name: f.type for f in fields(ValidationConfig)}
_TRUE_VALUES = ("true", "yes", "on", "1")
_FALSE_VALUES = ("false", "no", "off", "0")


class ConfigLoader:
    """
    Loads and merges ``ValidationConfig`` from multiple sources with precedence:
    overrides > environment variables > .env file > defaults
    """

    def __init__(self, env_prefix: str = "RULEWIRE_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_prefix: str = "RULEWIRE_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ValidationConfig:
        """
        Build a ``ValidationConfig`` from the environment.

        Args:
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated ``ValidationConfig``

        Raises:
            ConfigInvalidFault: On unknown keys or invalid values
        """
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader.config_data.update(overrides)

        return loader.build()

    def build(self) -> ValidationConfig:
        known = {f.name for f in fields(ValidationConfig)}
        unknown = sorted(set(self.config_data) - known)
        if unknown:
            raise ConfigInvalidFault(unknown[0], "unknown setting")

        config = ValidationConfig(**self.config_data)
        logger.debug("Loaded validation config: %s", config)
        return config

    def _load_env_file(self, path: str):
        """Load config from .env file."""
        env_path = Path(path)
        if not env_path.exists():
            logger.debug("Env file %s not found, skipping", env_path)
            return

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set(key, value)

    def _set(self, key: str, value: str):
        """Convert RULEWIRE_CASCADE_MODE to cascade_mode."""
        name = key[len(self.env_prefix):].lower()
        self.config_data[name] = self._parse_value(name, value)

    def _parse_value(self, name: str, value: str) -> Any:
        """Parse a string value according to the type of the setting it targets."""
        if _FIELD_TYPES.get(name) is not bool:
            return value
        if value.lower() in _TRUE_VALUES:
            return True
        if value.lower() in _FALSE_VALUES:
            return False
        raise ConfigInvalidFault(name, f"expected a boolean, got {value!r}")
