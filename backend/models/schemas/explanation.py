"""Human-readable explanation records for a match result."""

from typing import Literal

from pydantic import BaseModel

Severity = Literal["CRITICAL", "HIGH", "MEDIUM", "LOW"]
Priority = Literal["HIGH", "MEDIUM", "LOW"]


class Strength(BaseModel):
    category: str
    description: str
    evidence: str = ""
    impact: str = ""


class Gap(BaseModel):
    category: str
    severity: Severity
    description: str
    specifics: str = ""
    impact: str = ""
    priority: int = 99


class Recommendation(BaseModel):
    priority: Priority
    action: str
    details: str
    expected_impact: str = ""


class CategoryJustification(BaseModel):
    category: str
    earned: float
    possible: float
    percentage: int
    explanation: str


class Explanation(BaseModel):
    summary: str = ""
    strengths: list[Strength] = []
    gaps: list[Gap] = []
    recommendations: list[Recommendation] = []
    justification: list[CategoryJustification] = []
