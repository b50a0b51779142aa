"""Placeholder scanning, value conversion and substitution for prompt templates"""

import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

IDENTIFIER_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"
PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(" + IDENTIFIER_PATTERN + r")\s*\}\}")

_IDENTIFIER_RE = re.compile(r"^" + IDENTIFIER_PATTERN + r"$")

# Decimal with optional exponent, signed Infinity, unsigned 0x/0o/0b integers
NUMBER_PATTERN = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
    r"|[+-]?Infinity"
    r"|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
)
_RADIX_RE = re.compile(r"0[xXoObB][0-9a-fA-F]+")
_INTEGER_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class Placeholder:
    """A single `{{ name }}` occurrence in template text"""

    name: str
    start: int
    end: int
    raw: str


def is_identifier(name: str) -> bool:
    """Check a variable name against the placeholder identifier grammar"""
    return bool(name) and _IDENTIFIER_RE.match(name) is not None


def scan_placeholders(content: str) -> Iterator[Placeholder]:
    """Yield every placeholder in content, left to right"""
    for match in PLACEHOLDER_PATTERN.finditer(content):
        yield Placeholder(
            name=match.group(1),
            start=match.start(),
            end=match.end(),
            raw=match.group(0),
        )


def extract_placeholder_names(content: str) -> list[str]:
    """Unique placeholder names in order of first appearance"""
    seen: set[str] = set()
    names: list[str] = []
    for placeholder in scan_placeholders(content):
        if placeholder.name not in seen:
            seen.add(placeholder.name)
            names.append(placeholder.name)
    return names


def substitute(content: str, replacements: Mapping[str, str]) -> str:
    """Replace placeholders named in replacements, leaving the rest verbatim.

    The text is scanned once, so replacement values are never rescanned for
    further placeholders.
    """
    parts: list[str] = []
    position = 0
    for placeholder in scan_placeholders(content):
        if placeholder.name not in replacements:
            continue
        parts.append(content[position : placeholder.start])
        parts.append(replacements[placeholder.name])
        position = placeholder.end
    parts.append(content[position:])
    return "".join(parts)


def is_missing(value: Any) -> bool:
    """Absent, null and empty-string values all count as not provided"""
    return value is None or (isinstance(value, str) and value == "")


def format_value(value: Any) -> str:
    """String form of a variable value as it appears in rendered text"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list | tuple):
        return ",".join(format_value(item) for item in value)
    return str(value)


def is_number(value: Any) -> bool:
    """Numbers and numeric strings count; NaN, booleans and sequences do not"""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return not math.isnan(value)
    if isinstance(value, str):
        return NUMBER_PATTERN.fullmatch(value.strip()) is not None
    return False


def parse_number(text: str) -> int | float:
    """Numeric value of a string accepted by is_number"""
    text = text.strip()
    if _RADIX_RE.fullmatch(text):
        return int(text, 0)
    if _INTEGER_RE.fullmatch(text):
        return int(text)
    return float(text)


def parse_typed_value(text: str, var_type: str) -> Any:
    """Convert command line text to a variable's declared type.

    Text that does not fit the type is returned unchanged, so validation
    can still report it.
    """
    if var_type == "number":
        return parse_number(text) if is_number(text) else text
    if var_type == "boolean":
        if text.lower() == "true":
            return True
        if text.lower() == "false":
            return False
        return text
    if var_type == "array":
        if "," in text:
            return [item.strip() for item in text.split(",")]
        return [text]
    return text


def matches_type(value: Any, var_type: str) -> bool:
    """Coarse type check used by variable validation"""
    if var_type == "number":
        return is_number(value)
    if var_type == "boolean":
        return isinstance(value, bool) or value in ("true", "false")
    if var_type == "array":
        return isinstance(value, list | tuple | str)
    return True
