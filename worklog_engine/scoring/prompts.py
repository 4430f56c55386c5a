"""Prompts for worklog complexity scoring."""

import json

from worklog_engine.distribution.models import ScoringItem

SYSTEM_PROMPT = """You are a work complexity analyzer.

Your task is to assign each worklog a COMPLEXITY SCORE from 1 to 10.
The score describes the relative size of the work, not its importance.

Rules:
- Score every worklog you are given, exactly once.
- Use the worklog id exactly as given.
- Scores are integers from 1 to 10.
- Do NOT add extra fields or text.
"""

SCORING_GUIDE = """SCORING GUIDE:
- 1-2: Very simple (typo fix, minor text change)
- 3-4: Simple (small bug fix, basic feature)
- 5-6: Medium (feature implementation, moderate bug)
- 7-8: Complex (multi-component feature, difficult bug)
- 9-10: Very complex (architecture change, critical issue)"""

EMPTY_COMMENT = "No comment"


def build_scoring_input(items: list[ScoringItem]) -> list[dict[str, str]]:
    return [
        {
            "id": item.id,
            "summary": item.label,
            "comment": item.comment_text or EMPTY_COMMENT,
        }
        for item in items
    ]


def build_scoring_prompt(items: list[ScoringItem]) -> str:
    """Build the user prompt for a scoring batch.

    Args:
        items: Worklogs to score

    Returns:
        Prompt containing the scoring guide and the worklogs as JSON
    """
    payload = json.dumps(build_scoring_input(items), ensure_ascii=False)

    return f"""Analyze the following worklogs and assign each a COMPLEXITY SCORE from 1 to 10.

{SCORING_GUIDE}

INSTRUCTIONS:
- Analyze the issue summary and the worklog comment
- Return ONLY a JSON array
- Each item must have "id" and "score" (integer 1-10)

INPUT JSON:
{payload}

OUTPUT JSON FORMAT:
[
  {{"id": "worklog-id-1", "score": 7}},
  {{"id": "worklog-id-2", "score": 3}}
]"""
