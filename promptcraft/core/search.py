"""Prompt search: structural filters followed by relevance + usage ranking"""

import logging
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field

from promptcraft.core.scoring import UsageScoreLookup, calculate_fuzzy_score
from promptcraft.models.prompts import Prompt, PromptCategory
from promptcraft.models.usage import UsageLog

logger = logging.getLogger(__name__)


class SearchCriteria(BaseModel):
    """Search request; every field is optional"""

    query: str | None = Field(default=None, description="Free-text query")
    category: PromptCategory | None = Field(default=None, description="Category filter")
    tags: list[str] | None = Field(default=None, description="Match any of these tags")
    author: str | None = Field(default=None, description="Author substring filter")
    limit: int | None = Field(default=None, description="Maximum results when > 0")


class ScoredPrompt(BaseModel):
    """A search hit with the scores that ranked it"""

    prompt: Prompt
    fuzzy_score: float = 0
    usage_score: float = 0

    @property
    def total_score(self) -> float:
        return self.fuzzy_score + self.usage_score


def _by_recency(prompt: Prompt) -> float:
    return -prompt.updated_at.timestamp()


def matches_query(prompt: Prompt, query: str) -> bool:
    """Case-insensitive substring hit in name, description, content or a tag"""
    query_lower = query.lower()
    return (
        query_lower in prompt.name.lower()
        or query_lower in prompt.description.lower()
        or query_lower in prompt.content.lower()
        or any(query_lower in tag.lower() for tag in prompt.tags)
    )


def filter_prompts(prompts: Iterable[Prompt], criteria: SearchCriteria) -> list[Prompt]:
    """Apply the category, tag and author filters"""
    results = list(prompts)

    if criteria.category:
        results = [p for p in results if p.category == criteria.category]

    if criteria.tags:
        wanted = criteria.tags
        results = [p for p in results if any(tag in p.tags for tag in wanted)]

    if criteria.author:
        author = criteria.author.lower()
        results = [p for p in results if p.author and author in p.author.lower()]

    return results


def rank_prompts(
    prompts: Iterable[Prompt],
    criteria: SearchCriteria,
    usage_log: UsageLog | None = None,
    now: datetime | None = None,
) -> list[ScoredPrompt]:
    """Filter and order prompts, keeping the scores of each hit"""
    candidates = filter_prompts(prompts, criteria)

    if criteria.query:
        lookup = UsageScoreLookup(usage_log, now)
        scored = [
            ScoredPrompt(
                prompt=prompt,
                fuzzy_score=calculate_fuzzy_score(prompt, criteria.query),
                usage_score=lookup.score(prompt.id),
            )
            for prompt in candidates
            if matches_query(prompt, criteria.query)
        ]
        # sorted() is stable, so full ties keep snapshot order
        scored = sorted(
            scored,
            key=lambda item: (-item.total_score, _by_recency(item.prompt)),
        )
    else:
        scored = [
            ScoredPrompt(prompt=prompt)
            for prompt in sorted(candidates, key=_by_recency)
        ]

    if criteria.limit and criteria.limit > 0:
        scored = scored[: criteria.limit]

    logger.debug(
        f"Search query={criteria.query!r} matched {len(scored)} prompt(s)"
    )
    return scored


def search_prompts(
    prompts: Iterable[Prompt],
    criteria: SearchCriteria,
    usage_log: UsageLog | None = None,
    now: datetime | None = None,
) -> list[Prompt]:
    """Search prompts and return them in ranked order"""
    return [item.prompt for item in rank_prompts(prompts, criteria, usage_log, now)]
