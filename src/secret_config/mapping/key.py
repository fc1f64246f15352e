"""Mapping – ConfigurationKey and hierarchy helpers.

Keys are ``:``-delimited paths (``App:Feature:Enabled``). Comparison is
case-insensitive; a key keeps the casing of the secret that produced it.
"""
from __future__ import annotations

from typing import NewType

ConfigurationKey = NewType("ConfigurationKey", str)

KEY_DELIMITER = ":"


def normalize(key: str) -> str:
    """Return the case-insensitive lookup form of *key*."""
    return key.casefold()


def combine(*segments: str) -> ConfigurationKey:
    """Join *segments* with :data:`KEY_DELIMITER`, skipping empty ones."""
    return ConfigurationKey(KEY_DELIMITER.join(s for s in segments if s))


def split(key: str) -> list[str]:
    return key.split(KEY_DELIMITER) if key else []


def is_under(key: str, prefix: str) -> bool:
    """``True`` when *key* equals *prefix* or sits below it in the hierarchy."""
    base = normalize(prefix).rstrip(KEY_DELIMITER)
    if not base:
        return True
    candidate = normalize(key)
    return candidate == base or candidate.startswith(base + KEY_DELIMITER)


def child_segment(key: str, prefix: str) -> str | None:
    """Return the segment of *key* immediately below *prefix*, if any."""
    base = split(prefix.rstrip(KEY_DELIMITER))
    segments = split(key)
    if len(segments) <= len(base):
        return None
    if any(normalize(a) != normalize(b) for a, b in zip(segments, base)):
        return None
    return segments[len(base)]


__all__ = [
    "KEY_DELIMITER",
    "ConfigurationKey",
    "child_segment",
    "combine",
    "is_under",
    "normalize",
    "split",
]
