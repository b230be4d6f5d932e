"""Configuration loading and merging.

Settings are collected from four sources, highest precedence first:

1. explicit command-line flags
2. ``OTEL_CLI_*`` environment variables
3. the TOML config file (``~/.otel-cli.toml`` or an explicitly named path)
4. built-in defaults

Every setting is replaced whole by the highest source that supplies it, except
``attributes``, which is merged key by key so a flag only overrides the keys it
names.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from otel_cli.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".otel-cli.toml"
DEFAULT_SPAN_NAME = "todo-generate-default-span-names"
ENV_PREFIX = "OTEL_CLI_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _attribute_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ResolvedConfig(BaseModel):
    """Effective value of every setting for one invocation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    config_file: Optional[str] = None
    service_name: str = "otel-cli"
    span_name: str = DEFAULT_SPAN_NAME
    kind: str = "client"
    attributes: Dict[str, str] = Field(default_factory=dict)
    ignore_tp_env: bool = False
    print_span: bool = False
    strict_traceparent: bool = False
    sampled: bool = False
    endpoint: Optional[str] = None
    timeout: float = Field(default=10.0, gt=0)
    console: bool = False
    verbose: bool = False

    @field_validator("kind", mode="before")
    @classmethod
    def _stringify_kind(cls, value: Any) -> Any:
        if isinstance(value, (bool, int, float)):
            return _attribute_value(value)
        return value

    @field_validator("attributes", mode="before")
    @classmethod
    def _stringify_attributes(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {str(k): _attribute_value(v) for k, v in value.items()}
        return value


SETTINGS = tuple(ResolvedConfig.model_fields)
DEFAULTS: Dict[str, Any] = ResolvedConfig().model_dump()

_BOOL_SETTINGS = frozenset(
    name for name, field in ResolvedConfig.model_fields.items() if field.annotation is bool
)


def env_var_name(setting: str) -> str:
    return f"{ENV_PREFIX}{setting.upper()}"


def parse_attributes(text: str) -> Dict[str, str]:
    """
    Parse a ``key=value,key=value`` list into a dict.

    Empty items are skipped. Keys and values are kept verbatim, whitespace
    included. Values may contain ``=``; only the first one separates key from
    value.
    """
    attributes: Dict[str, str] = {}
    for item in text.split(","):
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ConfigError("attributes must be key=value pairs", {"item": item})
        attributes[key] = value
    return attributes


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError("expected a boolean value", {"setting": name, "value": raw})


def _coerce_attributes(value: Any) -> Dict[str, str]:
    if isinstance(value, Mapping):
        return {str(k): _attribute_value(v) for k, v in value.items()}
    if isinstance(value, str):
        return parse_attributes(value)
    raise ConfigError("attributes must be a table or a key=value list", {"value": value})


def find_config_file(home: Optional[str] = None) -> Optional[str]:
    """Return the default config file path if it exists."""
    base = Path(home) if home else Path.home()
    candidate = base / DEFAULT_CONFIG_FILENAME
    if candidate.is_file():
        return str(candidate)
    return None


def load_toml_config(path: str, required: bool = False) -> Dict[str, Any]:
    """
    Read a TOML config file into a dict.

    A missing file yields an empty dict unless ``required`` is set. Unreadable
    or unparseable files always raise ConfigError.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        if required:
            raise ConfigError("config file not found", {"path": path}) from exc
        return {}
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError("cannot parse config file", {"path": path, "error": exc}) from exc
    except OSError as exc:
        raise ConfigError("cannot read config file", {"path": path, "error": exc}) from exc


def file_settings(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep the recognized top-level keys of a loaded config file."""
    values: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")
        if key not in SETTINGS or key == "config_file":
            logger.debug("ignoring unknown config file key %r", raw_key)
            continue
        values[key] = _coerce_attributes(value) if key == "attributes" else value
    return values


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read ``OTEL_CLI_*`` variables, converted to their setting types."""
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    for setting in SETTINGS:
        raw = environ.get(env_var_name(setting))
        if raw is None or raw == "":
            continue
        if setting in _BOOL_SETTINGS:
            values[setting] = _parse_bool(setting, raw)
        elif setting == "attributes":
            values[setting] = parse_attributes(raw)
        elif setting == "timeout":
            try:
                values[setting] = float(raw)
            except ValueError as exc:
                raise ConfigError(
                    "expected a number", {"setting": setting, "value": raw}
                ) from exc
        else:
            values[setting] = raw
    return values


def resolve(
    defaults: Mapping[str, Any],
    file_values: Optional[Mapping[str, Any]] = None,
    env_values: Optional[Mapping[str, Any]] = None,
    flag_values: Optional[Mapping[str, Any]] = None,
) -> ResolvedConfig:
    """
    Merge the four sources into a ResolvedConfig.

    Sources are applied lowest precedence first; ``None`` means the source does
    not supply that setting. None of the inputs are modified.
    """
    merged: Dict[str, Any] = {}
    attributes: Dict[str, str] = {}
    for source in (defaults, file_values, env_values, flag_values):
        for key, value in (source or {}).items():
            if value is None:
                continue
            if key == "attributes":
                attributes.update(_coerce_attributes(value))
            else:
                merged[key] = value
    merged["attributes"] = attributes

    try:
        return ResolvedConfig.model_validate(merged)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError("invalid configuration", {"errors": problems}) from exc


def load_config_with_priority(
    flags: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[str] = None,
) -> ResolvedConfig:
    """
    Locate and read the config file, read the environment, and merge everything.

    A config file named by flag or environment must exist and parse; the
    default file in the home directory is optional.
    """
    flags = dict(flags or {})
    env_values = load_config_from_env(environ)

    explicit = flags.get("config_file") or env_values.get("config_file")
    if explicit:
        path: Optional[str] = explicit
        data = load_toml_config(explicit, required=True)
    else:
        path = find_config_file(home)
        data = load_toml_config(path) if path else {}

    file_values = file_settings(data)
    if path:
        file_values["config_file"] = path

    return resolve(DEFAULTS, file_values, env_values, flags)
