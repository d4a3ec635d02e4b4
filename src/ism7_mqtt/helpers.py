#!/usr/bin/env python3
"""ISM7 MQTT - Helper functions."""

from __future__ import annotations

import re
from typing import Any

_UMLAUTS = str.maketrans(
    {"ä": "ae", "ö": "oe", "ü": "ue", "Ä": "Ae", "Ö": "Oe", "Ü": "Ue", "ß": "ss"}
)
_INVALID_ID_CHARS = re.compile(r"[^a-zA-Z0-9_ ]")


def launder_id(value: Any) -> str:
    """Return a string that is safe to use in an MQTT topic/Home Assistant id.

    German umlauts are transliterated, spaces become underscores and any other
    character that is not [a-zA-Z0-9_] is removed.
    """
    result = str(value).translate(_UMLAUTS).replace(" ", "_")
    return _INVALID_ID_CHARS.sub("", result)


def join_topic(*parts: Any) -> str:
    """Join the parts of an MQTT topic, ignoring any that are empty."""
    return "/".join(str(p).strip("/") for p in parts if p not in (None, ""))
