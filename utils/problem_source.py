"""
Problem Source
--------------
Shared plumbing for the external problem catalogs:
1. Lazily created aiohttp session, closed on shutdown
2. GET with bounded timeout and exponential backoff on 429 / 5xx / timeouts
3. Random pick among well-formed problems, widening the pool when the
   source's preferred filter matches nothing

Subclasses only describe their catalog: where to fetch it, which records
are well-formed, which are preferred, and how to normalize one record into
a DailyProblem. Every failure surfaces as SourceUnavailable.
"""

import asyncio
import logging
import math
import random
from datetime import date
from typing import Optional, List, Dict, Any

import aiohttp

import config
from database.models import DailyProblem
from utils.errors import SourceUnavailable

logger = logging.getLogger(__name__)


MAX_RETRY_AFTER = 30.0


def retry_after_seconds(header: Optional[str], default: float) -> float:
    """Seconds to wait from a Retry-After header; HTTP-date or junk values use `default`"""
    try:
        seconds = float(header)
    except (TypeError, ValueError):
        return default
    if math.isnan(seconds) or seconds < 0:
        return default
    return min(seconds, MAX_RETRY_AFTER)


class ProblemSource:
    name = "source"
    HEADERS = {
        "User-Agent": "DailyChallengeBot/1.0",
        "Accept": "application/json",
    }

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None
    ):
        self.timeout = timeout if timeout is not None else config.SOURCE_TIMEOUT_SECONDS
        self.max_retries = max_retries if max_retries is not None else config.SOURCE_MAX_RETRIES
        self.retry_delay = retry_delay if retry_delay is not None else config.SOURCE_RETRY_DELAY
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.HEADERS)
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    # -----------------------------
    # Retry Logic with Exponential Backoff
    # -----------------------------

    async def _get_json(self, url: str) -> Any:
        """
        GET `url` and decode the body as JSON.

        Retries rate limits (429), server errors (5xx), timeouts and network
        errors with exponential backoff; other non-200 answers and bodies that
        are not JSON fail immediately.
        """
        session = await self._get_session()
        last_error = "no attempt made"

        for attempt in range(self.max_retries):
            delay = self.retry_delay * (2 ** attempt)
            try:
                async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.timeout)) as response:
                    if response.status == 200:
                        # raw.githubusercontent.com serves JSON as text/plain
                        return await response.json(content_type=None)

                    if response.status == 429 or response.status >= 500:
                        if response.status == 429:
                            delay = retry_after_seconds(response.headers.get("Retry-After"), delay)
                        last_error = f"HTTP {response.status}"
                        logger.warning(f"[{self.name}] {last_error}, retry in {delay}s (attempt {attempt + 1}/{self.max_retries})")
                        if attempt + 1 < self.max_retries:
                            await asyncio.sleep(delay)
                        continue

                    logger.error(f"[{self.name}] Client error {response.status} for {url}, not retrying")
                    raise SourceUnavailable(f"{self.name} answered HTTP {response.status}.")

            except ValueError as e:
                logger.error(f"[{self.name}] Malformed JSON from {url}: {e}")
                raise SourceUnavailable(f"{self.name} returned malformed data.") from e
            except asyncio.TimeoutError:
                last_error = f"timeout after {self.timeout}s"
            except aiohttp.ClientError as e:
                last_error = f"{type(e).__name__}: {e}"

            logger.warning(f"[{self.name}] {last_error}, retry in {delay}s (attempt {attempt + 1}/{self.max_retries})")
            if attempt + 1 < self.max_retries:
                await asyncio.sleep(delay)

        logger.error(f"[{self.name}] All {self.max_retries} attempts failed ({last_error})")
        raise SourceUnavailable(f"{self.name} is unavailable ({last_error}).")

    # -----------------------------
    # Catalog description (subclasses)
    # -----------------------------

    async def fetch_catalog(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def is_well_formed(self, record: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def is_preferred(self, record: Dict[str, Any]) -> bool:
        return True

    def to_daily_problem(self, record: Dict[str, Any], challenge_date: date) -> DailyProblem:
        raise NotImplementedError

    # -----------------------------
    # Selection
    # -----------------------------

    def select_record(self, records: List[Dict[str, Any]], rng=None) -> Optional[Dict[str, Any]]:
        """Random pick among preferred records, falling back to any well-formed one"""
        rng = rng or random
        usable = [r for r in records if isinstance(r, dict) and self.is_well_formed(r)]
        preferred = [r for r in usable if self.is_preferred(r)]
        if not preferred:
            logger.warning(f"[{self.name}] No preferred problems among {len(records)}, widening to {len(usable)} well-formed")
            preferred = usable
        if not preferred:
            return None
        return rng.choice(preferred)

    async def get_random_problem(self, challenge_date: date, rng=None) -> DailyProblem:
        records = await self.fetch_catalog()
        logger.info(f"[{self.name}] Fetched {len(records)} problems")

        record = self.select_record(records, rng)
        if record is None:
            raise SourceUnavailable(f"{self.name} returned no usable problem.")

        try:
            problem = self.to_daily_problem(record, challenge_date)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            logger.error(f"[{self.name}] Could not normalize problem record: {type(e).__name__}: {e}")
            raise SourceUnavailable(f"{self.name} returned a malformed problem.") from e
        logger.info(f"[{self.name}] Selected {problem.id} ({problem.difficulty.value}) for {challenge_date}")
        return problem
