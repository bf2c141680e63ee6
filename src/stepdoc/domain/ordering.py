"""Single-sequence move algorithm shared by steps and groups.

All functions return new tuples and never touch their inputs. Insertion
indices are always interpreted against the sequence *after* the moved
item has been removed, and are clamped rather than rejected so a drop
gesture is never lost.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum


class IndexBasis(StrEnum):
    """Which sequence state a destination index was computed against."""

    AFTER_REMOVAL = "after_removal"
    BEFORE_REMOVAL = "before_removal"


def clamp_index(index: int, length: int) -> int:
    """Clamp *index* to the valid insertion range ``[0, length]``."""
    return min(max(index, 0), length)


def normalize_destination(
    from_index: int,
    to_index: int,
    *,
    same_sequence: bool,
    basis: IndexBasis = IndexBasis.AFTER_REMOVAL,
) -> int:
    """Convert *to_index* to a post-removal insertion index.

    Removing an earlier element shifts every later index down by one, so
    a same-sequence index computed before removal that lies past the
    source position must be decremented. Cross-sequence indices are
    unaffected by the removal.
    """
    if same_sequence and basis is IndexBasis.BEFORE_REMOVAL and to_index > from_index:
        return to_index - 1
    return to_index


def reorder[T](items: Sequence[T], from_index: int, to_index: int) -> tuple[T, ...]:
    """Move the item at *from_index* to *to_index* within one sequence.

    Raises:
        IndexError: If *from_index* is out of range.
    """
    if not 0 <= from_index < len(items):
        msg = f"Source index {from_index} out of range for length {len(items)}"
        raise IndexError(msg)
    remaining = list(items)
    moved = remaining.pop(from_index)
    remaining.insert(clamp_index(to_index, len(remaining)), moved)
    return tuple(remaining)


def transfer[T](
    source: Sequence[T],
    destination: Sequence[T],
    from_index: int,
    to_index: int,
) -> tuple[tuple[T, ...], tuple[T, ...]]:
    """Move the item at *from_index* of *source* into *destination*.

    Returns ``(new_source, new_destination)``; both are computed before
    either is published so the item is never absent from both.

    Raises:
        IndexError: If *from_index* is out of range.
    """
    if not 0 <= from_index < len(source):
        msg = f"Source index {from_index} out of range for length {len(source)}"
        raise IndexError(msg)
    remaining = list(source)
    moved = remaining.pop(from_index)
    received = list(destination)
    received.insert(clamp_index(to_index, len(received)), moved)
    return tuple(remaining), tuple(received)
