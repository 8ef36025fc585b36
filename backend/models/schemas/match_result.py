"""Scoring engine output: six category results and the total."""

from typing import Literal

from pydantic import BaseModel

from models.schemas.skill_match import SkillMatch

CategoryName = Literal[
    "required_skills",
    "experience",
    "education",
    "preferred_skills",
    "keyword_density",
    "format_clarity",
]


class CategoryScoreResult(BaseModel):
    """Points earned in one weighted category plus the evidence behind them."""
    category: CategoryName
    points_earned: float = 0.0
    max_points: float = 0.0
    verdict: str = ""
    matched: list[str] = []
    missing: list[str] = []
    partial_matches: list[SkillMatch] = []
    details: dict[str, float | int | str | None] = {}


class MatchResult(BaseModel):
    """Total 0-100 score, its range label and the per-category breakdown."""
    total_score: int = 0
    label: str = ""
    breakdown: list[CategoryScoreResult] = []

    def category(self, name: CategoryName) -> CategoryScoreResult | None:
        for result in self.breakdown:
            if result.category == name:
                return result
        return None
