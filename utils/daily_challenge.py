"""
Daily Challenge Provider
Serves the problem of the day: cache first, external sources on a miss.

The cache (daily_problems table) is write-once per date, so whichever fetch
stores first becomes the day's problem for everybody; a concurrent fetch
that loses the race gets the stored problem back and its own pick is
discarded. Inside one process a per-date lock keeps concurrent misses from
fetching the catalog more than once.

Failures never reach the caller: no problem today is reported as None.
"""

import asyncio
import logging
from datetime import date
from typing import Optional, List, Dict

import config
from database.models import DailyProblem
from utils.codeforces_api import get_codeforces_api, close_codeforces_api
from utils.errors import ChallengeError, SourceUnavailable
from utils.leetcode_api import get_leetcode_api, close_leetcode_api
from utils.logic import today_utc
from utils.problem_source import ProblemSource

logger = logging.getLogger(__name__)

SOURCE_FACTORIES = {
    "leetcode": get_leetcode_api,
    "codeforces": get_codeforces_api,
}


def get_problem_sources(names: Optional[List[str]] = None) -> List[ProblemSource]:
    """Shared source instances for the configured names, unknown names skipped"""
    sources = []
    for name in names if names is not None else config.PROBLEM_SOURCES:
        factory = SOURCE_FACTORIES.get(name.lower())
        if factory is None:
            logger.warning(f"Unknown problem source '{name}' in PROBLEM_SOURCES, skipping")
            continue
        sources.append(factory())
    return sources


async def close_problem_sources():
    await close_leetcode_api()
    await close_codeforces_api()


class DailyChallengeProvider:
    """Cache-or-fetch access to the problem of the day"""

    def __init__(
        self,
        db,
        sources: Optional[List[ProblemSource]] = None,
        clock=today_utc,
        fetch_budget: Optional[float] = None,
        rng=None
    ):
        self.db = db
        self.sources = sources if sources is not None else get_problem_sources()
        self.clock = clock
        self.fetch_budget = fetch_budget if fetch_budget is not None else config.FETCH_BUDGET_SECONDS
        self.rng = rng
        self._locks: Dict[date, asyncio.Lock] = {}

    def _lock_for(self, day: date) -> asyncio.Lock:
        for stale in [d for d in self._locks if d < day and not self._locks[d].locked()]:
            del self._locks[stale]
        return self._locks.setdefault(day, asyncio.Lock())

    async def get_cached_challenge(self, day: date) -> Optional[DailyProblem]:
        """Cache lookup only, never fetches"""
        try:
            return await self.db.get_daily_problem(day)
        except ChallengeError as e:
            logger.error(f"Could not read daily problem for {day}: {e.message}")
            return None

    async def get_daily_challenge(self) -> Optional[DailyProblem]:
        today = self.clock()
        try:
            cached = await self.db.get_daily_problem(today)
            if cached:
                return cached

            async with self._lock_for(today):
                # Another task may have filled the cache while we waited
                cached = await self.db.get_daily_problem(today)
                if cached:
                    return cached

                logger.info(f"No daily problem cached for {today}, fetching from sources")
                problem = await asyncio.wait_for(self._fetch_from_sources(today), timeout=self.fetch_budget)
                stored = await self.db.put_daily_problem(problem)
                logger.info(f"Daily problem for {today}: {stored.id} ({stored.difficulty.value}, {stored.points} pts)")
                return stored

        except asyncio.TimeoutError:
            logger.error(f"Fetching the daily problem exceeded {self.fetch_budget}s, no challenge for {today}")
        except ChallengeError as e:
            logger.error(f"No challenge for {today}: [{e.code}] {e.message}")
        return None

    async def _fetch_from_sources(self, today: date) -> DailyProblem:
        for source in self.sources:
            try:
                return await source.get_random_problem(today, self.rng)
            except SourceUnavailable as e:
                logger.warning(f"[{source.name}] {e.message}")
        raise SourceUnavailable("No problem source could provide a problem.")


async def fetch_daily_programming_problem(db, **kwargs) -> Optional[DailyProblem]:
    """
    One-shot helper returning today's problem or None.

    Long-lived callers (the bot) should keep a single DailyChallengeProvider
    so concurrent misses share the in-process lock.
    """
    return await DailyChallengeProvider(db, **kwargs).get_daily_challenge()
