"""Load auto scaling specs and platform settings from YAML files.

String values may reference the environment as ``${VAR}`` or
``${VAR:-default}``. Every problem with a file's contents (bad YAML, a
non-mapping document, an unset variable, a failed model check) surfaces as
the package's ``ValidationError`` naming the file.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, TypeVar

import pydantic
import yaml
from pydantic import BaseModel

from apprunner_autoscaling.config.defaults import (
    build_spec,
    load_defaults,
    merge_configs,
)
from apprunner_autoscaling.config.models import AutoScalingSpec, PlatformConfig
from apprunner_autoscaling.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Matches ${VAR} or ${VAR:-default}
_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-((?:[^}\\]|\\.)*))?}")


def _resolve_env_str(value: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        var_name, default = match.group(1), match.group(2)
        env_val = os.environ.get(var_name)
        if env_val is not None:
            return env_val
        if default is not None:
            return default.replace("\\}", "}")
        msg = f"Environment variable '{var_name}' is not set and no default provided"
        raise ValueError(msg)

    return _ENV_PATTERN.sub(_replace, value)


def resolve_env_vars(data: Any) -> Any:
    """Recursively resolve ${VAR} and ${VAR:-default} in parsed YAML data."""
    if isinstance(data, str):
        return _resolve_env_str(data)
    if isinstance(data, dict):
        return {k: resolve_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars(item) for item in data]
    return data


def load_yaml(path: str | Path, *, kind: str = "config") -> dict[str, Any]:
    """Read a YAML mapping with environment references resolved.

    *kind* names the document in error messages ("spec", "platform config").
    """
    p = Path(path)
    if not p.exists():
        msg = f"{kind.capitalize()} file not found: {p}"
        raise FileNotFoundError(msg)

    try:
        with p.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        where = ""
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            where = f" at line {mark.line + 1}, column {mark.column + 1}"
        msg = f"Invalid {kind} ({p}): YAML parse error{where}: {exc}"
        raise ValidationError(msg) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = (
            f"Invalid {kind} ({p}): expected a YAML mapping at top level, "
            f"got {type(data).__name__}"
        )
        raise ValidationError(msg)

    try:
        resolved: dict[str, Any] = resolve_env_vars(data)
    except ValueError as exc:
        msg = f"Invalid {kind} ({p}): {exc}"
        raise ValidationError(msg) from exc
    return resolved


def _validate(model: type[ModelT], data: dict[str, Any], kind: str, source: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        msg = f"Invalid {kind} ({source}):\n{exc}"
        raise ValidationError(msg) from exc


def load_platform_config(path: str | Path | None = None) -> PlatformConfig:
    """Built-in platform defaults, deep-merged with the YAML at *path* if given."""
    data = load_defaults("platform")
    if path is not None:
        data = merge_configs(data, load_yaml(path, kind="platform config"))
    return _validate(PlatformConfig, data, "platform config", path or "built-in defaults")


def load_spec(path: str | Path, *, defaults: str = "autoscaling") -> AutoScalingSpec:
    """Load an auto scaling specification YAML merged with its defaults."""
    return build_spec(load_yaml(path, kind="spec"), defaults=defaults)
