"""Time-range assembly of candle series across bounded exchange requests.

Plans how many candles a window needs, walks FORWARD through the window in
batches of at most ``max_batch_size``, and merges the batches into a single
ascending, de-duplicated series clipped to the requested range.

Both the single-request and the multi-batch path share merge_candles so the
two never diverge in their dedup or filtering rules.
"""

import asyncio
import math
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from chartdesk.candles.fetcher import CandleFetcher
from chartdesk.candles.models import Candle
from chartdesk.candles.timeframes import MS_PER_MINUTE, minutes_per_candle
from chartdesk.logging import get_logger

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class BatchPlan:
    """How a [start_ms, end_ms] window maps onto exchange requests."""

    minutes_per_candle: int
    required_count: int
    max_batch_size: int

    @property
    def interval_ms(self) -> int:
        return self.minutes_per_candle * MS_PER_MINUTE

    @property
    def needs_batching(self) -> bool:
        return self.required_count > self.max_batch_size

    @property
    def batch_count(self) -> int:
        if self.required_count <= 0:
            return 0
        return math.ceil(self.required_count / self.max_batch_size)


def plan_batches(
    timeframe: str, start_ms: int, end_ms: int, max_batch_size: int
) -> BatchPlan:
    """Compute candle count and batch count for a window."""
    minutes = minutes_per_candle(timeframe)
    total_minutes = (end_ms - start_ms) / MS_PER_MINUTE
    return BatchPlan(
        minutes_per_candle=minutes,
        required_count=math.ceil(total_minutes / minutes),
        max_batch_size=max_batch_size,
    )


def merge_candles(candles: Iterable[Candle], start_ms: int, end_ms: int) -> list[Candle]:
    """De-duplicate by time (last seen wins), clip to [start_ms, end_ms], sort ascending.

    Bounds are inclusive and compared in milliseconds against candle time.
    """
    by_time: dict[int, Candle] = {}
    for candle in candles:
        by_time[candle.time] = candle

    return sorted(
        (c for c in by_time.values() if start_ms <= c.time * 1000 <= end_ms),
        key=lambda c: c.time,
    )


class RangeAssembler:
    """Drives CandleFetcher across a time window.

    Batches run sequentially with a fixed pause between them. Any fetch
    error aborts the whole assembly; partial results are never returned.

    Usage:
        assembler = RangeAssembler(fetcher, max_batch_size=1000, batch_delay=0.1)
        candles = await assembler.assemble("BTC/USDT", "1m", start_ms, end_ms)
    """

    def __init__(
        self,
        fetcher: CandleFetcher,
        max_batch_size: int = 1000,
        batch_delay: float = 0.1,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be positive")
        self._fetcher = fetcher
        self._max_batch_size = max_batch_size
        self._batch_delay = batch_delay
        self._sleep = sleep

    async def assemble(
        self, symbol: str, timeframe: str, start_ms: int, end_ms: int
    ) -> list[Candle]:
        """Return every available candle in [start_ms, end_ms], ascending and unique."""
        plan = plan_batches(timeframe, start_ms, end_ms, self._max_batch_size)

        logger.info(
            "assembly_planned",
            symbol=symbol,
            timeframe=timeframe,
            start_ms=start_ms,
            end_ms=end_ms,
            required_count=plan.required_count,
            batch_count=plan.batch_count,
            needs_batching=plan.needs_batching,
        )

        if plan.required_count <= 0:
            return []

        if plan.needs_batching:
            fetched = await self._fetch_batches(symbol, timeframe, start_ms, end_ms, plan)
        else:
            fetched = await self._fetcher.fetch(
                symbol, timeframe, since_ms=start_ms, limit=plan.required_count
            )

        result = merge_candles(fetched, start_ms, end_ms)

        logger.info(
            "assembly_complete",
            symbol=symbol,
            timeframe=timeframe,
            total_fetched=len(fetched),
            after_merge=len(result),
            first_time=result[0].time if result else None,
            last_time=result[-1].time if result else None,
        )
        return result

    async def _fetch_batches(
        self,
        symbol: str,
        timeframe: str,
        start_ms: int,
        end_ms: int,
        plan: BatchPlan,
    ) -> list[Candle]:
        """Walk FORWARD from start_ms in batches of max_batch_size.

        Stops on an empty batch (end of data), when the next since would reach
        end_ms, when no forward progress is made, or after plan.batch_count batches.
        """
        collected: list[Candle] = []
        since_ms = start_ms

        for i in range(plan.batch_count):
            if since_ms >= end_ms:
                break

            batch = await self._fetcher.fetch(
                symbol, timeframe, since_ms=since_ms, limit=self._max_batch_size
            )
            logger.debug(
                "batch_fetched",
                symbol=symbol,
                batch=f"{i + 1}/{plan.batch_count}",
                since_ms=since_ms,
                rows=len(batch),
            )

            if not batch:
                break

            collected.extend(batch)

            next_since = max(c.time for c in batch) * 1000 + plan.interval_ms
            if next_since <= since_ms:
                break  # No progress guard
            since_ms = next_since

            if since_ms >= end_ms:
                break

            # Rate limit safety delay between paginated calls
            await self._sleep(self._batch_delay)

        return collected
