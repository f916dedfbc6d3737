"""
Text normalization and parse-or-default helpers.

Résumé documents come from an AI extraction step and are loosely typed.
Everything here turns that free-form input into plain values without
raising: unparseable input becomes an explicit ``Unparsed`` outcome or an
empty value.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Union


def normalize_text(s: Any) -> str:
    if not isinstance(s, str):
        return ""
    return " ".join(s.strip().lower().split())


def as_text(value: Any) -> str:
    """Return stripped text for strings, empty string for anything else."""
    if isinstance(value, str):
        return value.strip()
    return ""


def as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def unique_texts(values: Any) -> List[str]:
    """Non-empty strings from ``values``, order kept, duplicates dropped."""
    seen = set()
    result = []
    for v in as_list(values):
        text = as_text(v)
        if text and text not in seen:
            seen.add(text)
            result.append(text)
    return result


@dataclass(frozen=True)
class Parsed:
    value: float

    def value_or(self, default: float) -> float:
        return self.value


@dataclass(frozen=True)
class Unparsed:
    raw: Any = None

    def value_or(self, default: float) -> float:
        return default


ParseOutcome = Union[Parsed, Unparsed]

# A number at the very start, followed by whitespace, a unit, "+" or nothing.
# "2020-2022" and "several years" do not match.
_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)(?=[\s+a-zA-Z]|$)")


def parse_leading_number(text: Any) -> ParseOutcome:
    """
    Parse the leading decimal number of a free-text duration.

    Examples:
        "2 years"   -> Parsed(2.0)
        "1.5 yrs"   -> Parsed(1.5)
        "18 months" -> Parsed(18.0)  (no unit conversion)
        "2020-2022" -> Unparsed
    """
    if not isinstance(text, str):
        return Unparsed(text)
    match = _LEADING_NUMBER.match(text)
    if not match:
        return Unparsed(text)
    return Parsed(float(match.group(1)))
