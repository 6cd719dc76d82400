import asyncio
from datetime import timedelta

from aiohttp import web

from database.models import ChallengeExample, DailyProblem
from utils.daily_challenge import DailyChallengeProvider, fetch_daily_programming_problem, get_problem_sources
from utils.codeforces_api import CodeforcesProblemSource
from utils.leetcode_api import LeetCodeProblemSource
from tests.fakes import FailingSource, StaticSource, make_problem, run, serve


def provider(db, day, sources, **kwargs):
    return DailyChallengeProvider(db, sources=sources, clock=lambda: day, **kwargs)


def test_cache_hit_skips_sources(db, day):
    db.problems[day] = make_problem(day, "Leet-9")
    source = StaticSource()

    problem = run(provider(db, day, [source]).get_daily_challenge())

    assert problem.id == "Leet-9"
    assert source.calls == 0


def test_cache_miss_fetches_and_stores(db, day):
    source = StaticSource("CF-1-A")

    problem = run(provider(db, day, [source]).get_daily_challenge())

    assert problem.id == "CF-1-A"
    assert problem.date == day
    assert db.problems[day].id == "CF-1-A"
    assert source.calls == 1


def test_same_problem_all_day(db, day):
    source = StaticSource()
    challenges = provider(db, day, [source])

    first = run(challenges.get_daily_challenge())
    second = run(challenges.get_daily_challenge())

    assert first.id == second.id
    assert source.calls == 1


def test_concurrent_misses_fetch_once(db, day):
    source = StaticSource(delay=0.01)
    challenges = provider(db, day, [source])

    async def race():
        return await asyncio.gather(*[challenges.get_daily_challenge() for _ in range(8)])

    results = run(race())

    assert {p.id for p in results} == {"Leet-1"}
    assert source.calls == 1
    assert db.problem_writes == 1


def test_two_providers_agree_on_first_write(db, day):
    """Separate processes each fetch, the first stored problem wins"""
    async def race():
        return await asyncio.gather(
            provider(db, day, [StaticSource("Leet-1", delay=0.01)]).get_daily_challenge(),
            provider(db, day, [StaticSource("Leet-2", delay=0.02)]).get_daily_challenge(),
        )

    first, second = run(race())

    assert first.id == second.id == "Leet-1"
    assert db.problems[day].id == "Leet-1"


def test_falls_back_to_next_source(db, day):
    down = FailingSource()
    up = StaticSource("CF-5-B")

    problem = run(provider(db, day, [down, up]).get_daily_challenge())

    assert problem.id == "CF-5-B"
    assert down.calls == 1


def test_all_sources_down_returns_none(db, day):
    assert run(provider(db, day, [FailingSource(), FailingSource()]).get_daily_challenge()) is None
    assert db.problems == {}


def test_fetch_budget_returns_none(db, day):
    slow = StaticSource(delay=1)
    assert run(provider(db, day, [slow], fetch_budget=0.01).get_daily_challenge()) is None
    assert db.problems == {}


def test_storage_failure_returns_none(db, day):
    db.broken = True
    assert run(provider(db, day, [StaticSource()]).get_daily_challenge()) is None


def test_cached_lookup_never_fetches(db, day):
    source = StaticSource()
    challenges = provider(db, day, [source])

    assert run(challenges.get_cached_challenge(day)) is None
    assert source.calls == 0


def test_configured_sources():
    sources = get_problem_sources(["LeetCode", "bogus", "codeforces"])
    assert [type(s) for s in sources] == [LeetCodeProblemSource, CodeforcesProblemSource]


def test_one_shot_helper(db, day):
    problem = run(fetch_daily_programming_problem(db, sources=[StaticSource("Leet-3")], clock=lambda: day))
    assert problem.id == "Leet-3"


def test_problem_round_trips_through_record(day):
    problem = make_problem(day)
    problem.examples = [ChallengeExample("a = 1", "2", "double it")]
    record = {
        "problem_id": problem.id,
        "title": problem.title,
        "description": problem.description,
        "difficulty": problem.difficulty.value,
        "points": problem.points,
        "challenge_date": problem.date,
        "examples": problem.examples_json(),
        "source": problem.source,
        "url": problem.url,
    }
    assert DailyProblem.from_record(record) == problem


def served_sources(payloads, scenario):
    """Run `scenario(leetcode, codeforces)` against sources reading the given JSON bodies"""
    async def handler(request):
        return web.json_response(payloads[request.path])

    async def main():
        async with serve(handler) as server:
            leetcode = LeetCodeProblemSource(str(server.make_url("/dump.json")), timeout=1, max_retries=1, retry_delay=0)
            codeforces = CodeforcesProblemSource(str(server.make_url("/api")), timeout=1, max_retries=1, retry_delay=0)
            try:
                return await scenario(leetcode, codeforces)
            finally:
                await leetcode.close()
                await codeforces.close()

    return run(main())


MALFORMED = {
    "/dump.json": {"1": {"data": None}, "2": {"data": {"question": {"questionId": "2", "title": 7, "content": "<p>x</p>"}}}},
    "/api/problemset.problems": {"status": "OK", "result": {"problems": [
        {"contestId": 1, "index": "A", "name": 5, "type": "PROGRAMMING"},
        {"contestId": 2, "index": "B", "name": "Strings", "rating": "1500", "type": "PROGRAMMING"},
    ]}},
}


def test_malformed_records_return_none(db, day):
    async def scenario(leetcode, codeforces):
        return await provider(db, day, [leetcode, codeforces]).get_daily_challenge()

    assert served_sources(MALFORMED, scenario) is None
    assert db.problems == {}


def test_malformed_records_fall_back_to_next_source(db, day):
    async def scenario(leetcode, codeforces):
        return await provider(db, day, [leetcode, codeforces, StaticSource("CF-8-E")]).get_daily_challenge()

    problem = served_sources(MALFORMED, scenario)
    assert problem.id == "CF-8-E"
    assert db.problems[day].id == "CF-8-E"


def test_unnormalizable_record_falls_back(db, day):
    payloads = {"/api/problemset.problems": {"status": "OK", "result": {"problems": [
        {"contestId": 3, "index": "C", "name": "Tagged", "tags": [None], "type": "PROGRAMMING"},
    ]}}}

    async def scenario(leetcode, codeforces):
        return await provider(db, day, [codeforces, StaticSource("Leet-4")]).get_daily_challenge()

    assert served_sources(payloads, scenario).id == "Leet-4"


def test_day_lock_survives_late_callers(db, day):
    challenges = provider(db, day, [StaticSource()])
    today_lock = challenges._lock_for(day)

    challenges._lock_for(day - timedelta(days=1))
    assert challenges._lock_for(day) is today_lock

    challenges._lock_for(day + timedelta(days=1))
    assert day not in challenges._locks
