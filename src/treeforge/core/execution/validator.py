from __future__ import annotations

"""
Execution Settings Validation.

Normalizes the runtime configuration coming from the persisted state, the CLI
or the GUI before it reaches the apply service. Coerces loosely typed input,
clamps numeric limits and falls back to defaults instead of failing, unless
strict mode is requested.
"""

import logging
from typing import Any, Dict, List, Tuple

from treeforge.domain import constants as const
from treeforge.domain.config import get_default_config
from treeforge.infra.fs import normalize_path

logger = logging.getLogger(__name__)

MAX_WORKERS_LIMIT = 32

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize an execution configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: (Normalized configuration, Warnings).

    Raises:
        TypeError: In strict mode, on a value of the wrong type.
        ValueError: In strict mode, on an out-of-range value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    target = _as_str(merged.get("target_path"), defaults["target_path"], "target_path", warnings, strict)
    # Blank stays blank so the apply service reports the missing target
    merged["target_path"] = normalize_path(target, target) if target else ""
    merged["dry_run"] = _as_bool(merged.get("dry_run"), defaults["dry_run"], "dry_run", warnings, strict)

    workers = _as_int(merged.get("max_workers"), defaults["max_workers"], "max_workers", warnings, strict)
    merged["max_workers"] = _clamp_workers(workers, warnings, strict)

    timeout = _as_float(merged.get("timeout_seconds"), defaults["timeout_seconds"],
                        "timeout_seconds", warnings, strict)
    if timeout <= 0:
        msg = f"Field 'timeout_seconds' must be positive, received {timeout}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using {defaults['timeout_seconds']}.")
        timeout = defaults["timeout_seconds"]
    merged["timeout_seconds"] = timeout

    style = _as_str(merged.get("serialize_style"), defaults["serialize_style"],
                    "serialize_style", warnings, strict).lower()
    if style not in const.SERIALIZE_STYLES:
        msg = f"Unknown serialize_style '{style}'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{defaults['serialize_style']}'.")
        style = defaults["serialize_style"]
    merged["serialize_style"] = style

    if warnings:
        logger.debug(f"Configuration normalized with {len(warnings)} warning(s).")
    return merged, warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce numbers (0/1) and human keywords into booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    if not strict and isinstance(value, (str, float)) and not isinstance(value, bool):
        try:
            coerced = int(float(value))
            warnings.append(f"Field '{field}' converted from '{value}' to {coerced}.")
            return coerced
        except ValueError:
            pass

    msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    if value is None:
        return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    if not strict and isinstance(value, str):
        try:
            coerced = float(value.strip())
            warnings.append(f"Field '{field}' converted from '{value}' to {coerced}.")
            return coerced
        except ValueError:
            pass

    msg = f"Invalid field '{field}': expected number, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _clamp_workers(workers: int, warnings: List[str], strict: bool) -> int:
    if 1 <= workers <= MAX_WORKERS_LIMIT:
        return workers
    msg = f"Field 'max_workers' out of range [1, {MAX_WORKERS_LIMIT}]: {workers}."
    if strict:
        raise ValueError(msg)
    clamped = min(max(workers, 1), MAX_WORKERS_LIMIT)
    warnings.append(f"{msg} Clamped to {clamped}.")
    return clamped
