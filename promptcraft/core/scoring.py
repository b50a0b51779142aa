"""Relevance and popularity scoring for prompt search.

Both scores are plain functions of their inputs. The weights below are the
established ranking formula; changing them changes result order for every
existing library.
"""

import math
import re
from datetime import datetime, timezone

from promptcraft.models.prompts import Prompt
from promptcraft.models.usage import UsageLog

FAVORITE_BONUS = 50
RECENCY_WINDOW_DAYS = 30
POSITION_BONUS = 10
SECONDS_PER_DAY = 86400

EXACT_NAME_BONUS = 100
EXACT_DESCRIPTION_BONUS = 80
EXACT_TAG_BONUS = 90
NAME_WORD_BOUNDARY_BONUS = 15
DESCRIPTION_WORD_BOUNDARY_BONUS = 10


def calculate_usage_score(
    prompt_id: str, usage_log: UsageLog, now: datetime | None = None
) -> float:
    """Popularity score from favorites, recency and position in recents"""
    now = now or datetime.now(timezone.utc)
    score = 0.0

    if usage_log.is_favorite(prompt_id):
        score += FAVORITE_BONUS

    recent = usage_log.find_recent(prompt_id)
    if recent is not None:
        position, entry = recent
        days_since_use = (now - entry.used_at).total_seconds() / SECONDS_PER_DAY
        if days_since_use < RECENCY_WINDOW_DAYS:
            score += max(RECENCY_WINDOW_DAYS - days_since_use, 0)
        score += max(POSITION_BONUS - position, 0)

    return score


class UsageScoreLookup:
    """Per-search memo of usage scores over one usage log snapshot"""

    def __init__(self, usage_log: UsageLog | None, now: datetime | None = None):
        self.usage_log = usage_log or UsageLog()
        self.now = now or datetime.now(timezone.utc)
        self._scores: dict[str, float] = {}

    def score(self, prompt_id: str) -> float:
        if prompt_id not in self._scores:
            self._scores[prompt_id] = calculate_usage_score(
                prompt_id, self.usage_log, self.now
            )
        return self._scores[prompt_id]


def calculate_fuzzy_score(prompt: Prompt, query: str) -> float:
    """Relevance of a prompt to a free-text query; 0 for an empty query"""
    if not query:
        return 0

    query_lower = query.lower()
    name = prompt.name.lower()
    description = prompt.description.lower()
    tags = [tag.lower() for tag in prompt.tags]
    score = 0

    # Exact matches
    if name == query_lower:
        score += EXACT_NAME_BONUS
    if description == query_lower:
        score += EXACT_DESCRIPTION_BONUS
    if any(tag == query_lower for tag in tags):
        score += EXACT_TAG_BONUS

    # Substring matches, earlier is better
    index = name.find(query_lower)
    if index != -1:
        score += max(50 - index * 2, 10)

    index = description.find(query_lower)
    if index != -1:
        score += max(30 - index, 5)

    for tag in tags:
        index = tag.find(query_lower)
        if index != -1:
            score += max(40 - index, 8)

    index = prompt.content.lower().find(query_lower)
    if index != -1:
        score += max(20 - index // 100, 2)

    word_boundary = re.compile(r"\b" + re.escape(query), re.IGNORECASE)
    if word_boundary.search(prompt.name):
        score += NAME_WORD_BOUNDARY_BONUS
    if word_boundary.search(prompt.description):
        score += DESCRIPTION_WORD_BOUNDARY_BONUS

    # Prefer names close in length to the query
    if len(query_lower) >= 3 and prompt.name:
        length_ratio = len(query_lower) / len(prompt.name)
        if length_ratio > 0.3:
            score += math.floor(length_ratio * 10)

    return score
