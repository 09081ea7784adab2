"""Name-based heuristics for parameter fields.

Both classifiers are ordered lookup tables; the first matching rule wins.
Misclassification is an accepted approximation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Last lines starting with these are markup rather than a sentence.
NON_PROSE_PREFIXES = ("#", "```", "<", "|")


@dataclass(frozen=True)
class LocationRule:
    location: str
    contains: Tuple[str, ...] = ()
    equals: Tuple[str, ...] = ()
    excludes: Tuple[str, ...] = ()

    def matches(self, lowered: str) -> bool:
        if any(token in lowered for token in self.excludes):
            return False
        return lowered in self.equals or any(token in lowered for token in self.contains)


@dataclass(frozen=True)
class DescriptionRule:
    contains: Tuple[str, ...]
    sentence: str


LOCATION_RULES: Tuple[LocationRule, ...] = (
    LocationRule("path", contains=("id",), excludes=("userid", "accountid")),
    LocationRule("header", contains=("header",), equals=("authorization", "auth", "apikey")),
    LocationRule("query", contains=("query", "limit", "offset", "page", "sort", "filter")),
    LocationRule("body", contains=("body", "data", "payload", "request")),
)
DEFAULT_LOCATION = "path"

DESCRIPTION_RULES: Tuple[DescriptionRule, ...] = (
    DescriptionRule(("id",), "Unique identifier for the resource."),
    DescriptionRule(("url", "endpoint"), "The API endpoint URL."),
    DescriptionRule(("key", "token", "auth"), "Authentication credentials or API key."),
    DescriptionRule(("options", "config"), "Configuration options for the request."),
    DescriptionRule(("data", "body", "payload"), "Request payload data."),
    DescriptionRule(("limit",), "Maximum number of results to return."),
    DescriptionRule(("offset", "skip"), "Number of results to skip."),
    DescriptionRule(("timeout",), "Request timeout in milliseconds."),
)

TYPE_DESCRIPTIONS = {
    "string": "The {name} value.",
    "number": "Numeric value for {name}.",
    "boolean": "Whether {name} is enabled.",
}
FALLBACK_DESCRIPTION = "The {name} parameter."


def classify_parameter_location(name: str) -> str:
    """Return ``path``, ``header``, ``query`` or ``body`` for a parameter name."""
    lowered = name.lower()
    for rule in LOCATION_RULES:
        if rule.matches(lowered):
            return rule.location
    return DEFAULT_LOCATION


def describe_parameter(name: str, type_text: str) -> str:
    """Synthesize a one-sentence description for an undocumented parameter."""
    lowered = name.lower()
    for rule in DESCRIPTION_RULES:
        if any(token in lowered for token in rule.contains):
            return rule.sentence
    template = TYPE_DESCRIPTIONS.get(type_text.strip(), FALLBACK_DESCRIPTION)
    return template.format(name=name)


def ends_with_prose(text: str) -> bool:
    """True when the last non-blank line of ``text`` is a sentence, not markup."""
    lines = [line.strip() for line in text.strip().split("\n")]
    return bool(lines[-1]) and not lines[-1].startswith(NON_PROSE_PREFIXES)


def ensure_period(text: str) -> str:
    """Normalize ``text`` to end with exactly one terminal mark.

    Text already ending in ``?`` or ``!``, or whose last line is a heading,
    fence, tag or table row, is returned stripped but otherwise unchanged.
    """
    cleaned = text.strip()
    if not cleaned or not ends_with_prose(cleaned) or cleaned.endswith(("?", "!")):
        return cleaned
    return cleaned.rstrip(". \t") + "."


__all__ = [
    "DESCRIPTION_RULES",
    "LOCATION_RULES",
    "classify_parameter_location",
    "describe_parameter",
    "ends_with_prose",
    "ensure_period",
]
