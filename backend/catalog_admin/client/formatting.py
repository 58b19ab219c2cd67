"""Display formatting for catalog values."""

from typing import Optional, Union

Number = Union[int, float]


def format_category_name(name: Optional[str]) -> str:
    """``"home-decoration"`` -> ``"Home Decoration"``; empty stays empty."""
    if not name:
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in name.split("-"))


def format_price(price: Number) -> str:
    return f"฿{price}"


def format_discount(value: Optional[Number]) -> str:
    return f"{value}%" if value is not None else "—"
