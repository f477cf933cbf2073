"""
Configuration for actionpack.

Settings can be created programmatically, picked from a preset, loaded from
a JSON/YAML file, or read from ACTIONPACK_* environment variables.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Strictness(str, Enum):
    """How much checking the lifecycle dispatcher does on each call."""
    VALIDATE = "validate"
    FAST = "fast"


@dataclass
class PackConfig:
    """
    Runtime settings.

    Attributes:
        strictness: VALIDATE checks handler tables on every call, FAST skips it
        log_level: Root log level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for rotating log files (None = console only)
        json_log_file: JSON log file name, relative to log_dir
    """
    strictness: Strictness = Strictness.VALIDATE
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    json_log_file: Optional[str] = None

    def __post_init__(self):
        try:
            self.strictness = Strictness(self.strictness)
        except ValueError:
            raise ConfigurationError(
                f"Unknown strictness {self.strictness!r}. "
                f"Valid values are: {', '.join(s.value for s in Strictness)}",
                key="strictness",
            ) from None
        if not isinstance(getattr(logging, str(self.log_level).upper(), None), int):
            raise ConfigurationError(
                f"Unknown log level {self.log_level!r}", key="log_level"
            )
        self.log_level = str(self.log_level).upper()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["strictness"] = self.strictness.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackConfig":
        """Create from a mapping, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def save(self, path: str) -> None:
        """Save config to a JSON file."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "PackConfig":
        """Load config from a JSON or YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        if path.endswith((".yaml", ".yml")):
            data = yaml.safe_load(content) or {}
        else:
            data = json.loads(content)

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        logger.debug(f"Loaded config from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls,
        prefix: str = "ACTIONPACK_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> "PackConfig":
        """Build config from environment variables such as ACTIONPACK_STRICTNESS."""
        environ = os.environ if environ is None else environ
        data = {}
        for name in cls.__dataclass_fields__:
            value = environ.get(f"{prefix}{name.upper()}")
            if value:
                data[name] = value
        return cls.from_dict(data)

    def dispatcher(self):
        """Return a lifecycle dispatcher bound to this strictness."""
        from .core.handle import LifecycleDispatcher
        return LifecycleDispatcher(self.strictness)

    def configure_logging(self) -> None:
        """Apply the logging settings."""
        from .logging_config import configure_logging
        configure_logging(
            level=self.log_level,
            log_dir=self.log_dir,
            json_file=self.json_log_file,
        )


PRESETS: Dict[str, PackConfig] = {
    "development": PackConfig(strictness=Strictness.VALIDATE, log_level="DEBUG"),
    "production": PackConfig(strictness=Strictness.FAST, log_level="WARNING"),
}


def get_preset(name: str) -> Optional[PackConfig]:
    """Get a built-in preset by name."""
    return PRESETS.get(name.lower())


def list_presets() -> List[str]:
    """List available preset names."""
    return list(PRESETS.keys())
