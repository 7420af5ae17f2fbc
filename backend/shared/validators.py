"""Validation helpers for arena server settings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


def parse_cors_origins(value: str | list[str]) -> list[str]:
    """Parse CORS origins from an environment variable or config value.

    Accepts a list of strings (returned as-is), a JSON array string
    ('["http://a","http://b"]') or a comma-separated string ('http://a,http://b').
    Empty values and malformed JSON raise ValueError.
    """
    if isinstance(value, list):
        if not value:
            raise ValueError("cors_origins must not be empty")
        return value

    stripped = value.strip()
    if not stripped:
        raise ValueError("cors_origins must not be empty")

    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array: {e}") from e
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            raise ValueError("JSON value must be an array of strings")
        if not parsed:
            raise ValueError("cors_origins must not be empty")
        return parsed

    origins = [origin.strip() for origin in stripped.split(",") if origin.strip()]
    if not origins:
        raise ValueError("cors_origins must not be empty")
    return origins


class CorsEnvSettingsSource(EnvSettingsSource):
    """Env source that hands ``cors_origins`` to the field validator as a raw string.

    pydantic-settings JSON-decodes list fields before validators run, which
    would reject the comma-separated form.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name == "cors_origins" and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
