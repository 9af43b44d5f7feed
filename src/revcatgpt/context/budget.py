"""
Token budget enforcement for rendered context fragments.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, NamedTuple


class BudgetedFragment(NamedTuple):
    text: str
    tokens: int
    total: int


def take_within_budget(
    fragments: Iterable[str],
    ceiling: int,
    estimate: Callable[[str], int],
) -> Iterator[BudgetedFragment]:
    """
    Lazily consume ``fragments`` until their summed token estimate exceeds ``ceiling``.

    Every fragment is yielded whole together with its own estimate and the
    running total. The fragment that pushes the total over ``ceiling`` is
    still yielded; nothing after it is pulled from ``fragments``.
    """
    total = 0
    for text in fragments:
        tokens = max(0, estimate(text))
        total += tokens
        yield BudgetedFragment(text, tokens, total)
        if total > ceiling:
            return
