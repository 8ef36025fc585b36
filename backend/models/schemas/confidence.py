"""Confidence estimate attached to a final score."""

from typing import Literal

from pydantic import BaseModel

BandTier = Literal["HIGH", "MEDIUM", "LOW"]


class ConfidenceFactor(BaseModel):
    factor: str
    weight: float
    score: float  # 0-100 sub-score
    note: str = ""


class DisplayRange(BaseModel):
    min: int = 0
    max: int = 100


class ConfidenceAssessment(BaseModel):
    """Five-factor confidence in the reported total.

    band is the +/- point range around the score (3, 5 or 8).
    """
    overall_confidence: int = 0
    band: int = 8
    tier: BandTier = "LOW"
    factors: list[ConfidenceFactor] = []
    display_range: DisplayRange = DisplayRange()
    explanation: str = ""
