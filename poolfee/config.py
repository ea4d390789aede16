"""
Pool-type parameter tables loaded from YAML.

The packaged default lives in ``poolfee/data/pool_types.yaml``. A different
file can be selected per call or through the ``POOLFEE_CONFIG`` environment
variable. Every table is checked against the bounds policy on load, so a
``FeeConfig`` that loads is always safe to hand to the engine.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum, unique
from pathlib import Path
from typing import Any, Mapping

import yaml

from .core.dynamic_fee.bounds import require_valid_params, validate_global_max_adj_rate
from .core.dynamic_fee.errors import DynamicFeeError, InvalidParamsError
from .core.dynamic_fee.types import PoolTypeParams

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "POOLFEE_CONFIG"

_SCI_INT = re.compile(r"^(\d+)[eE](\d+)$")


@unique
class PoolType(Enum):
    STABLE = "stable"
    STANDARD = "standard"
    VOLATILE = "volatile"


class ConfigError(DynamicFeeError):
    """Raised when a config document is malformed."""


@dataclass(frozen=True)
class FeeConfig:
    global_max_adj_rate: int
    pool_types: Mapping[PoolType, PoolTypeParams]

    def params_for(self, pool_type: PoolType | str) -> PoolTypeParams:
        try:
            key = PoolType(pool_type)
        except ValueError:
            raise ConfigError(f"unknown pool type: {pool_type!r}") from None
        try:
            return self.pool_types[key]
        except KeyError:
            raise ConfigError(f"pool type not configured: {key.value}") from None


def default_config_path() -> Path:
    # poolfee/config.py -> poolfee/data/pool_types.yaml
    return Path(__file__).resolve().parent / "data" / "pool_types.yaml"


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path)
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return default_config_path()


def parse_int(name: str, value: Any) -> int:
    """Parse a config integer: int, digit string (``_`` allowed) or ``<m>e<k>`` string."""
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().replace("_", "")
        m = _SCI_INT.match(text)
        if m:
            return int(m.group(1)) * 10 ** int(m.group(2))
        if text.isdigit():
            return int(text)
    raise ConfigError(f"{name} must be an integer, got {value!r}")


def _require_mapping(obj: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise ConfigError(f"{name} must be a mapping")
    return obj


def params_from_mapping(raw: Mapping[str, Any], *, name: str = "params") -> PoolTypeParams:
    """Build PoolTypeParams from a mapping; unknown or missing keys are errors."""
    fields = tuple(PoolTypeParams.__dataclass_fields__)
    unknown = sorted(set(raw) - set(fields))
    if unknown:
        raise ConfigError(f"{name}: unknown keys {unknown}")
    missing = [f for f in fields if f not in raw]
    if missing:
        raise ConfigError(f"{name}: missing keys {missing}")
    kwargs = {f: parse_int(f"{name}.{f}", raw[f]) for f in fields}
    try:
        return PoolTypeParams(**kwargs)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name}: {exc}") from exc


def config_from_mapping(doc: Mapping[str, Any]) -> FeeConfig:
    root = _require_mapping(doc, name="config")
    if "global_max_adj_rate" not in root:
        raise ConfigError("config: missing global_max_adj_rate")
    rate = parse_int("global_max_adj_rate", root["global_max_adj_rate"])
    violations = validate_global_max_adj_rate(rate)
    if violations:
        raise InvalidParamsError(violations)

    tables = _require_mapping(root.get("pool_types"), name="pool_types")
    pool_types: dict[PoolType, PoolTypeParams] = {}
    for key, raw in tables.items():
        try:
            pool_type = PoolType(key)
        except ValueError:
            raise ConfigError(f"unknown pool type: {key!r}") from None
        params = params_from_mapping(_require_mapping(raw, name=f"pool_types.{key}"), name=f"pool_types.{key}")
        require_valid_params(params)
        pool_types[pool_type] = params
    return FeeConfig(global_max_adj_rate=rate, pool_types=pool_types)


def load_fee_config(path: str | Path | None = None) -> FeeConfig:
    """Load and validate a fee config (explicit path, then $POOLFEE_CONFIG, then the default)."""
    resolved = resolve_config_path(path)
    try:
        doc = yaml.safe_load(resolved.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{resolved}: invalid YAML: {exc}") from exc
    config = config_from_mapping(doc)
    logger.debug(
        "loaded fee config from %s: %s",
        resolved,
        ", ".join(p.value for p in config.pool_types),
    )
    return config
