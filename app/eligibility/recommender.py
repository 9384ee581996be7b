"""Chapter recommender.

Combines the three pass/fail signals (income, budget, no asset risk) into
a tier and a recommended chapter. The mapping is an explicit table over
all eight combinations:

- 3 passes: High, Chapter 7
- 2 passes: Medium; Chapter 7 if the income test passed, otherwise 13
- 0 or 1 pass: Low, Chapter 13
"""

from dataclasses import dataclass

from app.eligibility.models import Chapter, Tier

# (income_pass, budget_pass, asset_pass) -> (tier, chapter)
DECISION_TABLE: dict[tuple[bool, bool, bool], tuple[Tier, Chapter]] = {
    (True, True, True): (Tier.HIGH, Chapter.CHAPTER_7),
    (True, True, False): (Tier.MEDIUM, Chapter.CHAPTER_7),
    (True, False, True): (Tier.MEDIUM, Chapter.CHAPTER_7),
    (False, True, True): (Tier.MEDIUM, Chapter.CHAPTER_13),
    (True, False, False): (Tier.LOW, Chapter.CHAPTER_13),
    (False, True, False): (Tier.LOW, Chapter.CHAPTER_13),
    (False, False, True): (Tier.LOW, Chapter.CHAPTER_13),
    (False, False, False): (Tier.LOW, Chapter.CHAPTER_13),
}


@dataclass(frozen=True)
class Recommendation:
    """Tier and chapter for one combination of classifier outcomes."""

    tier: Tier
    chapter: Chapter
    pass_count: int


def recommend_chapter(income_pass: bool, budget_pass: bool, asset_pass: bool) -> Recommendation:
    """Look up the tier and chapter for the three outcomes."""
    key = (bool(income_pass), bool(budget_pass), bool(asset_pass))
    tier, chapter = DECISION_TABLE[key]

    return Recommendation(tier=tier, chapter=chapter, pass_count=sum(key))
