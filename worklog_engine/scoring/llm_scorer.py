"""Complexity scorers backed by a language model.

Two ways to obtain a ScoreFn:
- build_llm_scorer: pydantic_ai Agent with structured output
- make_completion_scorer: any async prompt -> text function, parsed as JSON

Neither retries nor falls back. Failures propagate to the weight resolver,
which owns the fallback policy.
"""

import json
import re
from collections.abc import Awaitable, Callable
from typing import cast

from loguru import logger
from pydantic_ai import Agent

from worklog_engine.config.settings import Settings
from worklog_engine.config.settings import settings as default_settings
from worklog_engine.distribution.errors import ScoringResponseError
from worklog_engine.distribution.models import ComplexityScore, ScoreFn, ScoringItem
from worklog_engine.scoring.prompts import SYSTEM_PROMPT, build_scoring_prompt
from worklog_engine.services.llm.model import get_model

# Low temperature for consistent scoring
SCORING_TEMPERATURE = 0.1
MIN_SCORING_TOKENS = 500
TOKENS_PER_ITEM = 50

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

CompletionFn = Callable[[str], Awaitable[str]]


def scoring_token_budget(item_count: int) -> int:
    return max(MIN_SCORING_TOKENS, item_count * TOKENS_PER_ITEM)


def parse_complexity_scores(text: str) -> list[dict[str, object]]:
    """Parse a completion into raw score items.

    Accepts a bare JSON array or an array embedded in prose / code fences.
    Items that are not JSON objects are dropped; field-level validation is
    left to the weight resolver.

    Raises:
        ScoringResponseError: If no JSON array can be parsed
    """
    match = _JSON_ARRAY.search(text)
    candidate = match.group(0) if match else text

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ScoringResponseError(f"AI response format error: {e}") from e

    if not isinstance(parsed, list):
        raise ScoringResponseError(f"AI response format error: expected a JSON array, got {type(parsed).__name__}")

    return [item for item in parsed if isinstance(item, dict)]


def make_completion_scorer(complete: CompletionFn) -> ScoreFn:
    """Adapt a text-completion function into a complexity scorer."""

    async def score(items: list[ScoringItem]) -> list[dict[str, object]]:
        prompt = f"{SYSTEM_PROMPT}\n{build_scoring_prompt(items)}"
        logger.debug("Requesting complexity scores", items=len(items), prompt_length=len(prompt))
        response = await complete(prompt)
        return parse_complexity_scores(response)

    return score


def build_llm_scorer(settings: Settings | None = None) -> ScoreFn:
    """Build a scorer that asks the configured LLM for structured scores.

    The model is resolved on each call, so a missing API key surfaces as a
    scoring failure (and a fallback) rather than at construction time.
    """
    cfg = settings or default_settings

    async def score(items: list[ScoringItem]) -> list[ComplexityScore]:
        model = get_model(cfg.llm_provider, cfg.llm_model)
        agent = Agent(
            model=model,
            system_prompt=SYSTEM_PROMPT,
            output_type=list[ComplexityScore],
        )

        user_prompt = build_scoring_prompt(items)
        logger.debug(
            "Calling LLM for complexity scores",
            provider=cfg.llm_provider,
            model=cfg.llm_model,
            items=len(items),
            prompt_length=len(user_prompt),
        )

        result = await agent.run(
            user_prompt,
            model_settings={
                "temperature": SCORING_TEMPERATURE,
                "max_tokens": scoring_token_budget(len(items)),
            },
        )
        scores = cast(list[ComplexityScore], result.output)
        logger.debug("Complexity scores received", returned=len(scores), requested=len(items))
        return scores

    return score
