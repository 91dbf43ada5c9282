"""Lazy k-of-n subset enumeration."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TypeVar

T = TypeVar("T")


def enumerate_combinations(pool: Sequence[T], size: int) -> Iterator[tuple[T, ...]]:
    """Yield every subset of exactly ``size`` members of ``pool``.

    Each pool member is either included or skipped, so
    ``C(n, k) = C(n-1, k-1) + C(n-1, k)``. The split is replayed on an explicit
    stack with the include branch explored first, which gives the same order
    as :func:`itertools.combinations`. Nothing is filtered here; the generator
    is restartable by calling it again with the same arguments.

    ``size == 0`` yields a single empty tuple. A pool smaller than ``size``
    yields nothing.
    """

    if size < 0:
        raise ValueError(f"Combination size must be non-negative, got {size}.")
    items = tuple(pool)
    n = len(items)
    stack: list[tuple[int, tuple[T, ...]]] = [(0, ())]
    while stack:
        head, chosen = stack.pop()
        needed = size - len(chosen)
        if needed == 0:
            yield chosen
            continue
        if n - head < needed:
            continue
        stack.append((head + 1, chosen))
        stack.append((head + 1, chosen + (items[head],)))


def enumerate_size_range(
    pool: Sequence[T],
    min_size: int,
    max_size: int,
) -> Iterator[tuple[T, ...]]:
    """Chain :func:`enumerate_combinations` over ``min_size..max_size``."""

    for size in range(min_size, max_size + 1):
        yield from enumerate_combinations(pool, size)
