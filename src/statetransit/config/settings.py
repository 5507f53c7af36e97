"""Unified settings: keyword overrides, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — overrides passed to :meth:`TransitSettings.load`
  2. Env vars     — ``STATETRANSIT_*`` prefix
  3. TOML file    — ``statetransit.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource`. The
file is located by :func:`find_config`, unless a path is given explicitly.
"""

from __future__ import annotations

import functools
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from statetransit.config.models import ValidatorConfig
from statetransit.errors import ConfigError

CONFIG_FILENAME = "statetransit.toml"
CONFIG_ENV_VAR = "STATETRANSIT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file for *start* (default: cwd).

    ``STATETRANSIT_CONFIG`` names the file directly; a path that does not
    exist means no config. Otherwise the nearest ``statetransit.toml`` in
    *start* or one of its ancestors wins.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``statetransit.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class TransitSettings(BaseSettings):
    """Process-wide settings for validator defaults and logging.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        validator: Defaults for the generated validator name, the
            rejection message, the ``required`` option and the token
            rendered for absent values.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STATETRANSIT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    verbose: bool = False
    log_json: bool = False

    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> TransitSettings:
        """Construct settings, discovering ``statetransit.toml`` unless given.

        An explicit *config_path* that does not exist is ignored, the same
        as having no config file at all.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None


@functools.lru_cache(maxsize=1)
def get_settings() -> TransitSettings:
    """Return the cached process-wide settings."""
    return TransitSettings.load()


def reset_settings() -> None:
    """Drop the cached settings so the next lookup re-reads env and TOML."""
    get_settings.cache_clear()
