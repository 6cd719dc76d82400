from datetime import date
from typing import Optional, Dict, Any, List

import config
from database.models import DailyProblem
from utils.errors import SourceUnavailable
from utils.logic import difficulty_from_rating, points_for_difficulty
from utils.problem_source import ProblemSource


class CodeforcesProblemSource(ProblemSource):
    name = "Codeforces"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = (base_url or config.CODEFORCES_API_URL).rstrip("/")

    def generate_url(self, contest_id, index):
        return f"https://codeforces.com/problemset/problem/{contest_id}/{index}"

    async def fetch_catalog(self) -> List[Dict[str, Any]]:
        data = await self._get_json(f"{self.base_url}/problemset.problems")
        if not isinstance(data, dict) or data.get("status") != "OK":
            comment = data.get("comment", "Unknown error") if isinstance(data, dict) else "not an object"
            raise SourceUnavailable(f"Codeforces API error: {comment}")

        result = data.get("result")
        problems = result.get("problems") if isinstance(result, dict) else None
        if not isinstance(problems, list):
            raise SourceUnavailable("Codeforces API returned no problem list.")
        return problems

    def is_well_formed(self, problem: Dict[str, Any]) -> bool:
        contest_id, index, name = problem.get("contestId"), problem.get("index"), problem.get("name")
        rating = problem.get("rating")
        return bool(
            isinstance(contest_id, int) and not isinstance(contest_id, bool) and contest_id > 0
            and isinstance(index, str) and index.strip()
            and isinstance(name, str) and name.strip()
            and (rating is None or (isinstance(rating, int) and not isinstance(rating, bool)))
        )

    def is_preferred(self, problem: Dict[str, Any]) -> bool:
        return problem.get("type") == "PROGRAMMING"

    def to_daily_problem(self, problem: Dict[str, Any], challenge_date: date) -> DailyProblem:
        contest_id, index, name = problem["contestId"], problem["index"], problem["name"].strip()
        rating = problem.get("rating")
        difficulty = difficulty_from_rating(rating)
        url = self.generate_url(contest_id, index)
        tags = ", ".join(problem.get("tags") or []) or "N/A"

        return DailyProblem(
            id=f"CF-{contest_id}-{index}",
            title=f"{name} (CF: {contest_id}{index})",
            description=(
                f"Solve the problem: {name}\n"
                f"Link: {url}\n"
                f"Tags: {tags}\n"
                f"Rating: {rating or 'N/A'}"
            ),
            difficulty=difficulty,
            points=points_for_difficulty(difficulty),
            date=challenge_date,
            source="codeforces",
            url=url,
        )


_cf_service = None


def get_codeforces_api():
    global _cf_service
    if _cf_service is None:
        _cf_service = CodeforcesProblemSource()
    return _cf_service


async def close_codeforces_api():
    global _cf_service
    if _cf_service:
        await _cf_service.close()
        _cf_service = None
