"""
LeetCode Problem Source
-----------------------
Reads the public LeetCode question dump (one JSON object keyed by question
id, each value shaped like the GraphQL `question` response) and turns a
random question into the day's DailyProblem.

Statements are HTML; worked examples are lifted out of the statement so the
challenge embed can show them separately.
"""

import html
import re
from datetime import date
from typing import Optional, List, Dict, Any

import config
from database.models import DailyProblem, ChallengeExample
from utils.errors import SourceUnavailable
from utils.logic import difficulty_from_label, points_for_difficulty
from utils.problem_source import ProblemSource

KNOWN_DIFFICULTIES = ("Easy", "Medium", "Hard")

_PRE_BLOCK = re.compile(r"<pre>(.*?)</pre>", re.DOTALL | re.IGNORECASE)
_EXAMPLE_BLOCK = re.compile(r'<div class="example-block">(.*?)</div>', re.DOTALL | re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_EXAMPLE_FIELDS = re.compile(
    r"Input:\s*(?P<input>.*?)\s*Output:\s*(?P<output>.*?)\s*(?:Explanation:\s*(?P<explanation>.*))?$",
    re.DOTALL
)


def _strip_html(fragment: str) -> str:
    return html.unescape(_TAG.sub("", fragment)).strip()


def extract_examples(content: str) -> List[ChallengeExample]:
    """
    Pull Input/Output/Explanation triples out of a LeetCode statement.

    Handles both the classic `<pre>` layout and the newer
    `<div class="example-block">` layout; blocks that do not contain an
    Input and an Output are skipped.
    """
    if not content:
        return []

    blocks = _PRE_BLOCK.findall(content) or _EXAMPLE_BLOCK.findall(content)
    examples = []
    for block in blocks:
        match = _EXAMPLE_FIELDS.search(_strip_html(block))
        if not match:
            continue
        explanation = match.group("explanation")
        examples.append(ChallengeExample(
            input=match.group("input").strip(),
            output=match.group("output").strip(),
            explanation=explanation.strip() if explanation else None,
        ))
    return examples


class LeetCodeProblemSource(ProblemSource):
    name = "LeetCode"

    def __init__(self, url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.url = url or config.LEETCODE_PROBLEMS_URL

    async def fetch_catalog(self) -> List[Dict[str, Any]]:
        data = await self._get_json(self.url)
        if not isinstance(data, dict) or not data:
            raise SourceUnavailable("LeetCode dump is empty or malformed.")

        questions = []
        for wrapper in data.values():
            payload = wrapper.get("data") if isinstance(wrapper, dict) else None
            question = payload.get("question") if isinstance(payload, dict) else None
            if isinstance(question, dict):
                questions.append(question)
        return questions

    def is_well_formed(self, question: Dict[str, Any]) -> bool:
        question_id, title, content = question.get("questionId"), question.get("title"), question.get("content")
        if isinstance(question_id, bool) or not isinstance(question_id, (str, int)):
            return False
        return bool(
            str(question_id).strip()
            and isinstance(title, str) and title.strip()
            and isinstance(content, str) and content.strip()
        )

    def is_preferred(self, question: Dict[str, Any]) -> bool:
        # Premium questions have no public statement worth showing
        return question.get("difficulty") in KNOWN_DIFFICULTIES and not question.get("isPaidOnly")

    def generate_url(self, question: Dict[str, Any]) -> Optional[str]:
        slug = question.get("titleSlug")
        return f"https://leetcode.com/problems/{slug}/" if slug else None

    def to_daily_problem(self, question: Dict[str, Any], challenge_date: date) -> DailyProblem:
        difficulty = difficulty_from_label(question.get("difficulty"))
        content = question["content"]
        return DailyProblem(
            id=f"Leet-{question['questionId']}",
            title=question["title"].strip(),
            description=content,
            difficulty=difficulty,
            points=points_for_difficulty(difficulty),
            date=challenge_date,
            examples=extract_examples(content),
            source="leetcode",
            url=self.generate_url(question),
        )


# -----------------------------
# Singleton Access
# -----------------------------

_leetcode_service: Optional[LeetCodeProblemSource] = None


def get_leetcode_api() -> LeetCodeProblemSource:
    global _leetcode_service
    if _leetcode_service is None:
        _leetcode_service = LeetCodeProblemSource()
    return _leetcode_service


async def close_leetcode_api():
    global _leetcode_service
    if _leetcode_service:
        await _leetcode_service.close()
        _leetcode_service = None
