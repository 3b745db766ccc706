from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> List[str]:
    """Accept a list of names or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(v) for v in value]


@dataclass
class EmitterSettings:
    """Settings used to build emitters and configure logging.

    Sources, lowest to highest precedence:
    - defaults below
    - a YAML file (explicit path, or env EMITTER_SETTINGS_FILE)
    - environment variables EMITTER_LOG_LEVEL and EMITTER_EVENTS

    Example YAML::

        once_return_value: true
        log_level: DEBUG
        events:
          - user.created
          - user.deleted
    """

    once_return_value: Any = True
    events: List[str] = field(default_factory=list)
    log_level: str = "WARNING"

    def validate(self) -> None:
        self.events = _as_list(self.events)
        level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            logger.warning("Unknown log level %r; using WARNING", self.log_level)
            level = "WARNING"
        self.log_level = level

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmitterSettings":
        allowed = {f.name for f in dataclasses.fields(cls)}
        filtered = {k: v for k, v in data.items() if k in allowed}
        obj = cls(**filtered)
        obj.validate()
        return obj

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        out: Dict[str, Any] = {}
        if env.get("EMITTER_LOG_LEVEL"):
            out["log_level"] = env["EMITTER_LOG_LEVEL"]
        if env.get("EMITTER_EVENTS"):
            out["events"] = _as_list(env["EMITTER_EVENTS"])
        return out

    @classmethod
    def from_yaml_file(cls, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.debug("Settings file not found: %s", path)
            return {}
        with path.open("r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        logger.debug("Loaded emitter settings from %s", path)
        return raw

    @classmethod
    def from_sources(
        cls,
        *,
        env: Optional[Dict[str, str]] = None,
        file_path: Optional[Path | str] = None,
    ) -> "EmitterSettings":
        env = os.environ if env is None else env
        data: Dict[str, Any] = {}
        if file_path is None and env.get("EMITTER_SETTINGS_FILE"):
            file_path = env["EMITTER_SETTINGS_FILE"]
        if file_path is not None:
            data.update(cls.from_yaml_file(Path(file_path).expanduser().resolve()))
        data.update(cls.from_env(env))
        return cls.from_dict(data)
