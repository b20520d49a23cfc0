"""Struct tag helpers: ``key:"value"`` lookups, gorm tag settings and enum types."""

from __future__ import annotations

import json
import re

_ENUM_PATTERN = re.compile(r"enum\((.*?)\)")


def _unquote(quoted: str) -> str:
    try:
        value = json.loads(quoted)
    except ValueError:
        return quoted[1:-1]
    return value if isinstance(value, str) else quoted[1:-1]


def lookup_tag(tag: str, key: str) -> str:
    """Return the value stored under *key* in a conventional struct tag, or ``""``."""
    rest = tag
    while rest:
        rest = rest.lstrip(" ")
        i = 0
        while i < len(rest) and rest[i] > " " and rest[i] not in ':"\x7f':
            i += 1
        if i == 0 or i + 1 >= len(rest) or rest[i] != ":" or rest[i + 1] != '"':
            break
        name = rest[:i]
        rest = rest[i + 1 :]

        i = 1
        while i < len(rest) and rest[i] != '"':
            if rest[i] == "\\":
                i += 1
            i += 1
        if i >= len(rest):
            break
        quoted = rest[: i + 1]
        rest = rest[i + 1 :]
        if name == key:
            return _unquote(quoted)
    return ""


def parse_tag_settings(value: str, sep: str = ";") -> dict[str, str]:
    """Parse a gorm-style ``key:value;flag`` setting string into upper-cased keys.

    A trailing backslash escapes the separator. Flags without a value map to
    their own key.
    """
    settings: dict[str, str] = {}
    names = value.split(sep)
    i = 0
    while i < len(names):
        j = i
        while names[j] and names[j].endswith("\\") and i + 1 < len(names):
            i += 1
            names[j] = names[j][:-1] + sep + names[i]
            names[i] = ""
        values = names[j].split(":")
        key = values[0].upper().strip()
        if len(values) >= 2:
            settings[key] = ":".join(values[1:])
        elif key:
            settings[key] = key
        i += 1
    return settings


def json_name(tag: str, default: str) -> str:
    """First comma-delimited segment of the ``json`` tag, falling back to *default*."""
    name = lookup_tag(tag, "json").split(",")[0]
    return name or default


def extract_enum_values(type_setting: str) -> list[str]:
    match = _ENUM_PATTERN.search(type_setting)
    if match is None:
        return []
    values = [v.strip().strip("'") for v in match.group(1).split(",")]
    return [v for v in values if v]
