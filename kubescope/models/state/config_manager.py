"""Load AppSettings from the process environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from kubescope.models.state.app_settings import AppSettings, ConfigLoadError

logger = logging.getLogger(__name__)

ENV_PREFIX = "KUBESCOPE_"

_LIST_FIELDS = frozenset({"jwt_algorithms", "cors_origins"})
_BOOL_TRUE = frozenset({"1", "true", "yes", "on"})
_BOOL_FALSE = frozenset({"0", "false", "no", "off"})


class ConfigManager:
    """Builds validated settings from ``KUBESCOPE_*`` environment variables.

    ``JWT_SECRET`` is accepted as a fallback for ``KUBESCOPE_JWT_SECRET`` so the
    backend can share the auth service's environment.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def _raw_values(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field_name, field in AppSettings.model_fields.items():
            raw = self._environ.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is None:
                continue
            if field_name in _LIST_FIELDS:
                values[field_name] = [part.strip() for part in raw.split(",") if part.strip()]
            elif field.annotation is bool:
                values[field_name] = self._parse_bool(field_name, raw)
            else:
                values[field_name] = raw

        if "jwt_secret" not in values and self._environ.get("JWT_SECRET"):
            values["jwt_secret"] = self._environ["JWT_SECRET"]
        return values

    @staticmethod
    def _parse_bool(field_name: str, raw: str) -> bool:
        lowered = raw.strip().lower()
        if lowered in _BOOL_TRUE:
            return True
        if lowered in _BOOL_FALSE:
            return False
        raise ConfigLoadError(f"{ENV_PREFIX}{field_name.upper()} must be a boolean, got {raw!r}")

    def load(self, **overrides: Any) -> AppSettings:
        """Return validated settings.

        Args:
            **overrides: Values that take precedence over the environment
                (CLI flags, tests).

        Raises:
            ConfigLoadError: When a value fails validation.
        """
        values = self._raw_values()
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            settings = AppSettings(**values)
        except ValidationError as exc:
            raise ConfigLoadError(str(exc)) from exc

        if settings.auth_enabled and not settings.jwt_secret:
            logger.warning("Auth is enabled but no JWT secret is configured; every request will be rejected")
        return settings
