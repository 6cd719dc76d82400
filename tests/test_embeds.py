from utils.embeds import code_block, error_embed, html_to_text, problem_embed
from utils.errors import AlreadySubmitted, NotFound
from tests.fakes import make_problem


def test_html_to_text():
    text = html_to_text("<p>Find <code>a</code> &amp; <strong>b</strong>.</p><p>Then stop.</p>")
    assert text == "Find a & b.\n\nThen stop."
    assert html_to_text("<p>" + "x" * 50 + "</p>", limit=10) == "x" * 9 + "…"


def test_code_block_cannot_be_escaped():
    block = code_block("print('```')", "python")
    assert block.startswith("```python\n")
    assert block.count("```") == 2


def test_error_embeds():
    assert error_embed(AlreadySubmitted()).title == "⚠️ Already Done"
    assert error_embed(NotFound("Submission `x` not found.")).description == "Submission `x` not found."


def test_problem_embed(day):
    embed = problem_embed(make_problem(day))
    assert embed.title == "🏆 Two Sum"
    assert [f.name for f in embed.fields][:3] == ["Date", "Difficulty", "Points"]
