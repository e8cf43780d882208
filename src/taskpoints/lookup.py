"""Id parsing and lookup shared by the task and reward flows."""

import re
from typing import Optional, Protocol, Sequence

from .errors import InvalidAmount, InvalidId, NotFound

# ASCII digits only: no "1_000", no non-Latin numerals
INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class HasId(Protocol):
    id: int


def resolve_id(item_id: int, items: Sequence[HasId], kind: str = "item") -> int:
    """Return the list index of the item with this id.

    A plain linear scan; the lists are small and hand-curated.
    """
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise NotFound(item_id, kind)


def validate_id(raw: str, max_known_id: int) -> int:
    """Parse user text as an id in 1..max_known_id.

    The ceiling is the highest id ever issued, not the number of live items,
    so an id that was deleted still passes here and fails in resolve_id.
    """
    item_id = _parse_int(raw)
    if item_id is None or item_id < 1 or item_id > max_known_id:
        raise InvalidId(str(raw))
    return item_id


def validate_amount(raw: str) -> int:
    """Parse points or a price; must be a whole number >= 0"""
    amount = _parse_int(raw)
    if amount is None or amount < 0:
        raise InvalidAmount(str(raw))
    return amount


def _parse_int(raw: str) -> Optional[int]:
    text = str(raw).strip()
    if not INTEGER_RE.fullmatch(text):
        return None
    return int(text)
