"""Settings dataclass and JSON persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..core.languages import Language
from .backend_client import ClientSettings

__all__ = ["Settings", "SettingsStore"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".smartcompile"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "SMARTCOMPILE_BACKEND_URL": "backend_url",
    "SMARTCOMPILE_DEFAULT_LANGUAGE": "default_language",
    "SMARTCOMPILE_THEME": "theme",
    "SMARTCOMPILE_FONT_FAMILY": "font_family",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "SMARTCOMPILE_DEBUG_LOGGING": "debug_logging",
}
_FLOAT_ENV_OVERRIDES: Mapping[str, str] = {
    "SMARTCOMPILE_REQUEST_TIMEOUT": "request_timeout",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "SMARTCOMPILE_FONT_SIZE": "font_size",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions.

    Editor contents are never part of the settings payload.
    """

    backend_url: str = "http://127.0.0.1:5000"
    request_timeout: float | None = None
    default_language: str = Language.PYTHON.value
    theme: str = "dark"
    font_family: str = "JetBrains Mono"
    font_size: int = 13
    debug_logging: bool = False
    default_headers: dict[str, str] = field(default_factory=dict)

    def client_settings(self) -> ClientSettings:
        """Project the subset consumed by :class:`BackendClient`."""

        return ClientSettings(
            base_url=self.backend_url,
            request_timeout=self.request_timeout,
            default_headers=dict(self.default_headers) or None,
            debug_logging=self.debug_logging,
        )


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, then apply environment and CLI overrides in that order."""

        payload = self._read_payload()
        settings = Settings()
        if payload:
            data = _filter_fields(payload)
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()
        LOGGER.debug("Settings loaded from %s (%d key(s))", self._path, len(payload))

        settings = self._apply_env_overrides(settings)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")
        return self._normalize_language(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain a JSON object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid integer", env_name, value)
        for env_name, field_name in _FLOAT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = float(value)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid float", env_name, value)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings

    def _normalize_language(self, settings: Settings) -> Settings:
        try:
            language = Language.coerce(settings.default_language)
        except ValueError as exc:
            LOGGER.warning("%s; falling back to %s", exc, Language.PYTHON.value)
            language = Language.PYTHON
        if language.value != settings.default_language:
            settings = replace(settings, default_language=language.value)
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}
