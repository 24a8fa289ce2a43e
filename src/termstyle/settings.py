"""Console settings with layered precedence: defaults < JSON file < environment.

The file is ``$TERMSTYLE_CONFIG`` when set, else ``~/.termstyle/settings.json``.
Keys use camelCase in the file (``maxLineLength``); snake_case is accepted
as well. Environment overrides:

- ``TERMSTYLE_LINE_LENGTH``  -> ``maxLineLength``
- ``TERMSTYLE_VERBOSITY``    -> ``verbosity``
- ``TERMSTYLE_DECORATED``    -> ``decorated``
- ``TERMSTYLE_TABLE_STYLE``  -> ``tableStyle``
- ``TERMSTYLE_BAR_WIDTH``    -> ``barWidth``
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from termstyle.output import Verbosity

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".termstyle"
CONFIG_FILE_NAME = "settings.json"
CONFIG_ENV_VAR = "TERMSTYLE_CONFIG"

_ENV_KEYS = {
    "TERMSTYLE_LINE_LENGTH": "maxLineLength",
    "TERMSTYLE_VERBOSITY": "verbosity",
    "TERMSTYLE_DECORATED": "decorated",
    "TERMSTYLE_TABLE_STYLE": "tableStyle",
    "TERMSTYLE_BAR_WIDTH": "barWidth",
}


class ConsoleSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_line_length: int = Field(default=120, ge=1, alias="maxLineLength")
    verbosity: str = "normal"
    # None auto-detects color support on the stream
    decorated: bool | None = None
    interactive: bool = True
    table_style: str = Field(default="style-guide", alias="tableStyle")
    bar_width: int = Field(default=28, ge=1, alias="barWidth")

    @field_validator("verbosity")
    @classmethod
    def check_verbosity(cls, value: str) -> str:
        name = value.strip().lower().replace("-", "_")
        if name.upper() not in Verbosity.__members__:
            expected = ", ".join(member.lower() for member in Verbosity.__members__)
            raise ValueError(f"Unknown verbosity {value!r}, expected one of: {expected}")
        return name

    @property
    def verbosity_level(self) -> Verbosity:
        return Verbosity[self.verbosity.upper()]


# --- Merge ---


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge *overrides* into *base*; nested dicts merge, ``None`` never overrides."""
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


# --- Loading ---


def _to_aliases(data: dict[str, Any]) -> dict[str, Any]:
    """Rename snake_case field names to their camelCase aliases."""
    aliases = {name: field.alias for name, field in ConsoleSettings.model_fields.items() if field.alias}
    return {aliases.get(key, key): value for key, value in data.items()}


def default_settings_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    configured = env.get(CONFIG_ENV_VAR)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _read_settings_file(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return _to_aliases(data)


def _environment_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    return {key: env[name] for name, key in _ENV_KEYS.items() if env.get(name, "") != ""}


def load_settings(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> ConsoleSettings:
    """Build settings from the settings file and the environment.

    An explicit *path* must exist; the default location is optional.
    Malformed JSON raises ``json.JSONDecodeError`` and invalid values raise
    ``pydantic.ValidationError``.
    """
    env = os.environ if environ is None else environ

    merged: dict[str, Any] = {}
    if path is not None:
        merged = deep_merge_settings(merged, _read_settings_file(Path(path)))
    else:
        default_path = default_settings_path(env)
        if default_path.is_file():
            merged = deep_merge_settings(merged, _read_settings_file(default_path))
        else:
            logger.debug("No settings file at %s", default_path)

    merged = deep_merge_settings(merged, _environment_overrides(env))
    return ConsoleSettings.model_validate(merged)
