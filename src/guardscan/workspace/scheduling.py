"""Cooperative scheduling primitives used by the workspace orchestrator."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator, Sequence
from typing import TypeVar

T = TypeVar("T")


async def yield_point(delay: float = 0.0) -> None:
    """Hand control back to the event loop, optionally pausing for *delay* seconds."""
    await asyncio.sleep(max(0.0, delay))


def batched(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Split *items* into consecutive lists of at most *size* elements."""
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
