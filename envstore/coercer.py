"""Conversion of raw env values into typed values."""

from __future__ import annotations

import re

CoercedValue = bool | str | None

_LITERALS: dict[str, CoercedValue] = {
    "true": True,
    "(true)": True,
    "false": False,
    "(false)": False,
    "empty": "",
    "(empty)": "",
    "null": None,
    "(null)": None,
}

# Same quote character on both ends; inner content is returned verbatim.
QUOTED_PATTERN = re.compile(r"\A(['\"])(.*)\1\Z", re.DOTALL)


def coerce(raw: str | None) -> CoercedValue:
    """
    Map a raw value to its typed form.

    The literals true/false/empty/null (optionally in parentheses, any case)
    become True, False, "" and None. A value wrapped in matching single or
    double quotes is unwrapped without escape processing. Anything else is
    returned unchanged.
    """
    if raw is None:
        return None

    lowered = raw.lower()
    if lowered in _LITERALS:
        return _LITERALS[lowered]

    match = QUOTED_PATTERN.match(raw)
    if match:
        return match.group(2)

    return raw
