"""Shared helpers for reading config sections and validating values.

Every helper takes the full dotted key (``provider.timeout``) so error messages
point at the offending entry. Type problems raise TypeError, value problems
raise ValueError.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

_MISSING = object()


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return the top-level section `key`, or an empty mapping when optional and absent.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {key}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{key} must be an object")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    value = section.get(field, _MISSING)
    if value is _MISSING:
        raise ValueError(f"Missing required config: {config_key}")
    return value


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_optional_str(value: Any, config_key: str) -> str | None:
    """Accept a string or null; blank strings read as null."""
    if value is None:
        return None
    return expect_str(value, config_key).strip() or None


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    # YAML `true` is an int subclass in Python; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def expect_float(value: Any, config_key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    return float(value)


def expect_str_list(value: Any, config_key: str) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"{config_key} must be a list")
    bad = [idx for idx, item in enumerate(value) if not isinstance(item, str)]
    if bad:
        raise TypeError(f"{config_key}[{bad[0]}] must be a string")
    return list(value)


def normalize_choices(values: Iterable[str]) -> tuple[str, ...]:
    """Lower-case, strip and de-duplicate choice values, keeping first-seen order."""
    return tuple(dict.fromkeys(v.strip().lower() for v in values if v.strip()))


def check_http_url(url: str, config_key: str) -> None:
    """Raise ValueError unless `url` is an absolute http(s) URL."""
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"{config_key} must be an http(s) URL")
