"""Strict skill-to-skill similarity.

Only pairs listed in SKILL_SIMILARITY earn partial credit. Anything absent is
unrelated (0.0) unless the two names normalize to the same skill. A partial
match is worth at most half of an exact one.
"""

import re
from types import MappingProxyType

from models.schemas.skill_match import SkillMatch

MAX_PARTIAL_CREDIT = 0.5

# Lookups try a->b, then b->a, so a pair only needs one direction.
SKILL_SIMILARITY: dict[str, dict[str, float]] = {
    # Frameworks and libraries
    "spring": {"spring boot": 0.70, "spring mvc": 0.70, "spring framework": 0.90},
    "spring boot": {"spring": 0.70, "spring mvc": 0.60},
    "react": {
        "react.js": 1.0,
        "reactjs": 1.0,
        "next.js": 0.60,
        "gatsby": 0.50,
        "preact": 0.50,
    },
    "next.js": {"react": 0.60, "nextjs": 1.0},
    "angular": {"angularjs": 0.40, "angular.js": 0.40, "angular 2+": 0.90},
    "vue": {"vue.js": 1.0, "vuejs": 1.0, "nuxt": 0.60, "nuxt.js": 0.60},
    # Backend frameworks
    "node.js": {
        "nodejs": 1.0,
        "express": 0.60,
        "express.js": 0.60,
        "nestjs": 0.50,
        "koa": 0.50,
    },
    "express": {"express.js": 1.0, "node.js": 0.60, "koa": 0.40, "fastify": 0.40},
    "django": {"python": 0.60, "flask": 0.40, "fastapi": 0.40},
    "flask": {"python": 0.60, "django": 0.40, "fastapi": 0.50},
    "fastapi": {"python": 0.60, "flask": 0.50, "django": 0.40},
    # Databases
    "mysql": {"postgresql": 0.50, "mariadb": 0.70, "sql": 0.60},
    "postgresql": {"mysql": 0.50, "postgres": 1.0, "sql": 0.60},
    "sql server": {"mysql": 0.40, "postgresql": 0.40, "sql": 0.60},
    "mongodb": {"nosql": 0.60, "couchdb": 0.30, "dynamodb": 0.30},
    "redis": {"memcached": 0.50, "nosql": 0.40},
    "sql": {"nosql": 0.20, "mysql": 0.60, "postgresql": 0.60},
    "nosql": {"sql": 0.20, "mongodb": 0.60},
    # Languages
    "python 2": {"python": 0.70, "python 3": 0.70},
    "python 3": {"python": 0.90, "python 2": 0.70},
    "java": {
        "java 8": 0.80,
        "java 11": 0.80,
        "kotlin": 0.40,
        "scala": 0.30,
        "javascript": 0.0,
    },
    "kotlin": {"java": 0.40, "android": 0.60},
    "javascript": {"js": 1.0, "typescript": 0.60, "ecmascript": 0.90, "java": 0.0},
    "typescript": {"javascript": 0.70, "ts": 1.0},
    "c++": {"c": 0.40, "cpp": 1.0},
    "c#": {"csharp": 1.0, ".net": 0.70, "c++": 0.20, "c": 0.20},
    # Cloud
    "aws": {"amazon web services": 1.0, "azure": 0.40, "gcp": 0.40, "google cloud": 0.40},
    "azure": {"aws": 0.40, "gcp": 0.40, "microsoft azure": 1.0},
    "gcp": {
        "google cloud": 1.0,
        "google cloud platform": 1.0,
        "aws": 0.40,
        "azure": 0.40,
    },
    # DevOps
    "kubernetes": {"k8s": 1.0, "docker": 0.50, "docker swarm": 0.40},
    "docker": {"kubernetes": 0.50, "containerization": 0.70},
    "jenkins": {"ci/cd": 0.60, "gitlab ci": 0.30, "github actions": 0.30},
    "gitlab ci": {"ci/cd": 0.60, "github actions": 0.40, "jenkins": 0.30},
    # Mobile
    "ios": {"swift": 0.70, "objective-c": 0.60, "android": 0.20},
    "android": {"kotlin": 0.70, "java": 0.60, "ios": 0.20},
    "react native": {"react": 0.70, "flutter": 0.30, "ios": 0.40, "android": 0.40},
    "flutter": {"dart": 0.70, "react native": 0.30},
}

_SUFFIXES = (
    " development",
    " programming",
    " language",
    " framework",
    " library",
    " database",
    " management",
    " system",
    " systems",
    " skills",
    " experience",
)

_ABBREVIATIONS = {
    "oop": "object-oriented",
    "oops": "object-oriented",
    "dbms": "database",
    "rdbms": "relational database",
    "sql": "structured query language",
    "nosql": "non-relational database",
    "html": "hypertext markup language",
    "css": "cascading style sheets",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "cpp": "c++",
    "cs": "c#",
    "aws": "amazon web services",
    "gcp": "google cloud platform",
    "ml": "machine learning",
    "ai": "artificial intelligence",
    "ci/cd": "continuous integration",
    "api": "application programming interface",
    "rest": "representational state transfer",
    "json": "javascript object notation",
    "xml": "extensible markup language",
    "ui": "user interface",
    "ux": "user experience",
}

# Applied in order; each replaces the first occurrence of its key.
_REPLACEMENTS = (
    ("reactjs", "react"),
    ("react.js", "react"),
    ("nodejs", "node"),
    ("node.js", "node"),
    ("vuejs", "vue"),
    ("vue.js", "vue"),
    ("angularjs", "angular"),
    ("angular.js", "angular"),
    ("c sharp", "c#"),
    ("csharp", "c#"),
    ("cplusplus", "c++"),
    ("c plus plus", "c++"),
    ("mongodb", "mongo"),
    ("postgresql", "postgres"),
    ("object oriented", "object-oriented"),
    ("structured query", "sql"),
    ("relational databases", "relational database"),
)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_skill(skill: str) -> str:
    """Reduce a skill name to a canonical spelling for equality checks."""
    if not skill or not isinstance(skill, str):
        return ""

    normalized = skill.lower().strip()
    for suffix in _SUFFIXES:
        if normalized.endswith(suffix):
            normalized = normalized[: -len(suffix)]

    normalized = _ABBREVIATIONS.get(normalized, normalized)

    for key, replacement in _REPLACEMENTS:
        if key in normalized:
            normalized = normalized.replace(key, replacement, 1)

    normalized = normalized.replace(".", "").replace("-", " ")
    return _WHITESPACE_RE.sub(" ", normalized).strip()


def explain_partial(required: str, found: str, similarity: float) -> str | None:
    """Human-readable description of how closely two skills relate."""
    if similarity == 1.0:
        return f"Exact match: {found}"
    pct = round(similarity * 100)
    if similarity >= 0.7:
        return f"Strong related skill: {found} ({pct}% similar to {required})"
    if similarity >= 0.5:
        return f"Related skill: {found} ({pct}% similar to {required})"
    if similarity >= 0.3:
        return f"Weakly related: {found} ({pct}% similar to {required})"
    if similarity > 0:
        return f"Minimally related: {found} ({pct}% similar to {required})"
    return None


def credit_for(similarity: float) -> float:
    """Credit for a best-match similarity. Partial credit is capped at 0.5."""
    if similarity == 1.0:
        return 1.0
    if similarity > 0:
        return similarity * MAX_PARTIAL_CREDIT
    return 0.0


class SkillSimilarityResolver:
    """Resolves similarity between skill names against a fixed dictionary."""

    def __init__(self, table: dict[str, dict[str, float]] | None = None) -> None:
        source = SKILL_SIMILARITY if table is None else table
        self._table = MappingProxyType(
            {k: MappingProxyType(dict(v)) for k, v in source.items()}
        )

    def resolve(self, a: str, b: str) -> float:
        s1 = (a or "").lower().strip()
        s2 = (b or "").lower().strip()
        if not s1 or not s2:
            return 0.0
        if s1 == s2:
            return 1.0

        forward = self._table.get(s1)
        if forward is not None and s2 in forward:
            return forward[s2]
        backward = self._table.get(s2)
        if backward is not None and s1 in backward:
            return backward[s1]

        if normalize_skill(s1) == normalize_skill(s2):
            return 1.0
        return 0.0

    def calculate_skill_credit(
        self, required: str, candidates: list[str]
    ) -> SkillMatch:
        """Best match for ``required`` among ``candidates``.

        The highest similarity wins; on ties the first candidate seen is kept.
        """
        best_skill: str | None = None
        best_similarity = 0.0
        for candidate in candidates:
            similarity = self.resolve(required, candidate)
            if similarity > best_similarity:
                best_skill = candidate
                best_similarity = similarity

        credit = credit_for(best_similarity)
        if best_similarity == 1.0:
            kind = "EXACT"
        elif best_similarity > 0:
            kind = "PARTIAL"
        else:
            kind = "NONE"

        return SkillMatch(
            required_skill=required,
            matched_skill=best_skill,
            similarity=best_similarity,
            credit=credit,
            kind=kind,
            explanation=(
                explain_partial(required, best_skill, best_similarity)
                if best_skill
                else None
            ),
        )
