from __future__ import annotations

import asyncio
import random


def compute_backoff(attempt: int, base: float = 0.5, jitter: float = 0.25) -> float:
    """Compute exponential backoff with jitter."""
    delay = base * (2 ** (attempt - 1))
    return delay + random.uniform(0, jitter)


async def schedule_retry(attempt: int) -> None:
    """Sleep for computed backoff delay before retrying."""
    delay = compute_backoff(attempt)
    await asyncio.sleep(delay)
