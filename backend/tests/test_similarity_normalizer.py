import pytest

from services.similarity_normalizer import (
    SIMILARITY_TIERS,
    get_tier,
    normalize_batch,
    normalize_similarity,
)


class TestTiers:
    @pytest.mark.parametrize(
        "similarity, tier",
        [
            (1.0, "EXCEPTIONAL"),
            (0.80, "EXCEPTIONAL"),
            (0.79, "HIGH"),
            (0.65, "HIGH"),
            (0.6499, "MEDIUM"),
            (0.50, "MEDIUM"),
            (0.35, "LOW"),
            (0.34, "NONE"),
            (0.0, "NONE"),
        ],
    )
    def test_boundaries(self, similarity, tier):
        assert get_tier(similarity) == tier

    def test_out_of_range_is_clamped(self):
        assert get_tier(-0.2) == "NONE"
        assert get_tier(1.7) == "EXCEPTIONAL"
        assert normalize_similarity(1.5).similarity == 1.0

    def test_tiers_are_ordered_highest_first(self):
        lowers = [lower for _, lower, _, _ in SIMILARITY_TIERS]
        assert lowers == sorted(lowers, reverse=True)


class TestPoints:
    def test_top_of_high_tier(self):
        result = normalize_similarity(0.79)
        assert result.tier == "HIGH"
        assert result.points == 20.53

    def test_tier_restarts_at_zero(self):
        # Each tier interpolates from its own floor.
        result = normalize_similarity(0.80)
        assert result.tier == "EXCEPTIONAL"
        assert result.points == 0.0
        assert normalize_similarity(0.79).points > result.points

    def test_truncates_rather_than_rounds(self):
        assert normalize_similarity(0.7999).points == 21.98

    def test_perfect_similarity(self):
        result = normalize_similarity(1.0)
        assert result.points == 25.0
        assert result.tier_max_points == 25

    def test_none_tier_awards_nothing(self):
        result = normalize_similarity(0.3)
        assert result.points == 0.0
        assert "No points awarded" in result.explanation

    def test_scaled_max_points(self):
        assert normalize_similarity(1.0, max_points=10).points == 10.0

    def test_explanation_format(self):
        assert normalize_similarity(0.79).explanation == (
            "79% similarity - High relevance - 20.5/25 points"
        )


def test_normalize_batch():
    results = normalize_batch([0.2, 0.9])
    assert [r.tier for r in results] == ["NONE", "EXCEPTIONAL"]
