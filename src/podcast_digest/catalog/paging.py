from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


def dedupe_by_id(items: Iterable[T]) -> list[T]:
    """Drop repeated ids, keeping the first occurrence and the original order."""
    seen: set[str] = set()
    out: list[T] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        out.append(item)
    return out


def overfetch_size(page: int, page_size: int) -> int:
    """How many items to request upstream so that `page` can be sliced locally."""
    return max(1, page) * max(1, page_size)


def page_slice(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """1-based page of `items`. Pages past the end are empty."""
    page = max(1, page)
    page_size = max(1, page_size)
    start = (page - 1) * page_size
    return list(items[start : start + page_size])
