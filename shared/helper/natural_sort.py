"""Natural ("human") ordering of strings: "Doc 2" sorts before "Doc 10"."""

import re
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")

_DIGITS = re.compile(r"(\d+)")


def natural_key(value: str | None) -> tuple:
    """
    Builds a sort key that compares digit runs numerically and everything else case-insensitively.
    Digit runs sort before text at the same position.

    Args:
        value (str | None): The string to build the key for. None sorts like "".

    Returns:
        tuple: A key usable with sorted().
    """
    parts = _DIGITS.split((value or "").strip())
    # split() alternates text and digit runs, starting with text
    return tuple(
        (0, int(part), "") if index % 2 else (1, 0, part.casefold())
        for index, part in enumerate(parts)
        if part
    )


def natural_sort(items: Iterable[T], key: Callable[[T], str | None]) -> list[T]:
    """
    Sorts items ascending by the natural order of key(item). Equal keys keep their input order.

    Args:
        items (Iterable[T]): The items to sort.
        key (Callable[[T], str | None]): Extracts the string to compare.

    Returns:
        list[T]: A new, sorted list.
    """
    return sorted(items, key=lambda item: natural_key(key(item)))
