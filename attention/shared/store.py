from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from attention.shared.config import AppConfig
from attention.shared.paths import config_path, ensure_app_dirs

log = logging.getLogger(__name__)


class ConfigStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        ensure_app_dirs()
        self._path = path or config_path()

    def load(self) -> AppConfig:
        if not self._path.exists():
            cfg = AppConfig()
            self.save(cfg)
            return cfg

        try:
            raw = self._path.read_text(encoding="utf-8")
            data: Any = json.loads(raw)
            return AppConfig.model_validate(data)
        except Exception:
            # The broken file is kept as config.json.bad
            backup = self._path.with_name(self._path.name + ".bad")
            self._path.replace(backup)
            log.warning("Config at %s is unreadable, moved to %s and restored defaults", self._path, backup)
            cfg = AppConfig()
            self.save(cfg)
            return cfg

    def save(self, cfg: AppConfig) -> None:
        self._path.write_text(cfg.model_dump_json(indent=2), encoding="utf-8")

    def update(self, cfg: AppConfig, **changes: Any) -> AppConfig:
        """Validate ``changes`` on top of ``cfg``, persist and return the new config.

        Raises pydantic.ValidationError without touching the file when a
        value is out of range.
        """
        new = AppConfig.model_validate({**cfg.model_dump(), **changes})
        self.save(new)
        return new

    def path(self) -> str:
        return str(self._path)
