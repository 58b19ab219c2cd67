"""Input normalization helpers."""

import re
from typing import Iterable, List, Optional

_WHITESPACE = re.compile(r"\s+")


def slugify(name: Optional[str]) -> str:
    """Convert a category name to its stored slug form.

    Lowercases, drops apostrophes and joins whitespace runs with a hyphen:
    ``"Home Decoration"`` -> ``"home-decoration"``, ``"Men's Shirts"`` ->
    ``"mens-shirts"``.
    """
    if not name:
        return ""
    value = name.strip().lower().replace("'", "")
    return _WHITESPACE.sub("-", value)


def parse_int_list(raw_values: Optional[Iterable[str]]) -> List[int]:
    """Parse repeated and/or comma-separated integer query values.

    ``["1,2", "5"]`` -> ``[1, 2, 5]``. Duplicates are dropped, order kept.

    Raises:
        ValueError: A non-empty part is not an integer
    """
    ids: List[int] = []
    for raw in raw_values or []:
        for part in str(raw).split(","):
            part = part.strip()
            if not part:
                continue
            value = int(part)
            if value not in ids:
                ids.append(value)
    return ids


def parse_csv(raw: Optional[str]) -> List[str]:
    """Split a comma-separated string, dropping blanks."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
