"""ID patterns, validation, and generation.

Steps and groups get a kind prefix followed by 12 random hex chars
(``stp_3f9a0c1d2e4b``, ``grp_77a0b1c2d3e4``).

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Container

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "step": re.compile(r"^stp_[0-9a-f]{12}$"),
    "group": re.compile(r"^grp_[0-9a-f]{12}$"),
}

TYPE_PREFIXES: dict[str, str] = {
    "step": "stp_",
    "group": "grp_",
}

_HEX_LENGTH = 12


def generate_id(kind: str, taken: Container[str] = ()) -> str:
    """Generate a fresh ID for *kind* that is not contained in *taken*.

    Raises:
        KeyError: If *kind* has no registered prefix.
    """
    prefix = TYPE_PREFIXES[kind]
    while True:
        candidate = f"{prefix}{uuid.uuid4().hex[:_HEX_LENGTH]}"
        if candidate not in taken:
            return candidate


def validate_id(entity_id: str, kind: str) -> bool:
    """Check whether *entity_id* matches the generated pattern for *kind*.

    Documents loaded from elsewhere may carry arbitrary opaque ids, so the
    model never requires this; it only tells generated ids apart.
    """
    pattern = ID_PATTERNS.get(kind)
    if pattern is None:
        return False
    return pattern.match(entity_id) is not None
