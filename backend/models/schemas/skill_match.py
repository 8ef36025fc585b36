"""Result of resolving one required skill against a candidate's skills."""

from typing import Literal

from pydantic import BaseModel

MatchKind = Literal["EXACT", "PARTIAL", "NONE"]


class SkillMatch(BaseModel):
    required_skill: str
    matched_skill: str | None = None  # None if nothing related was found
    similarity: float = 0.0  # 0.0-1.0 from the similarity dictionary
    credit: float = 0.0  # 1.0 exact, similarity * 0.5 partial, 0.0 none
    kind: MatchKind = "NONE"
    explanation: str | None = None
