import json

import pytest

from services.errors import AITransportError
from services.requirement_extractor import (
    ParseError,
    RequirementExtractor,
    parse_ai_response,
)

FULL_RESPONSE = {
    "requiredSkills": ["Python", "Django", "PostgreSQL"],
    "preferredSkills": ["Kubernetes"],
    "requiredExperience": 5,
    "educationRequirement": "Bachelor's",
    "responsibilities": ["Build APIs"],
    "keywords": ["backend", "python"],
}


def make_extractor(client, **kwargs):
    kwargs.setdefault("timeout", 1)
    kwargs.setdefault("retries", 1)
    kwargs.setdefault("backoff_seconds", 0)
    return RequirementExtractor(client, **kwargs)


class TestParseAIResponse:
    def test_code_fences(self):
        text = (
            "```json\n"
            '{"requiredSkills": ["Python"], "requiredExperience": "5+",'
            ' "educationRequirement": "Bachelor\'s degree in CS"}\n'
            "```"
        )
        parsed = parse_ai_response(text)
        assert parsed.required_skills == ["Python"]
        assert parsed.required_experience == 5
        assert parsed.education_requirement == "Bachelor's"

    def test_leading_prose(self):
        parsed = parse_ai_response('Here you go: {"keywords": ["fintech"]} hope it helps')
        assert parsed.keywords == ["fintech"]

    def test_no_json(self):
        assert isinstance(parse_ai_response("no json here"), ParseError)
        assert isinstance(parse_ai_response(""), ParseError)

    def test_wrong_types_become_empty(self):
        parsed = parse_ai_response('{"requiredSkills": "Python", "requiredExperience": true}')
        assert parsed.required_skills == []
        assert parsed.required_experience == 0
        assert parsed.raw["requiredSkills"] == "Python"


class TestRequirementExtractor:
    @pytest.mark.asyncio
    async def test_without_ai_uses_fallback_only(self, offline_client, sample_jd):
        extractor = make_extractor(offline_client)
        assert not extractor.ai_available

        requirements = await extractor.extract(sample_jd)
        assert requirements.required_skills == ["python", "django", "postgresql", "redis"]
        assert requirements.required_experience_years == 5
        assert requirements.education_requirement == "Bachelor's"
        assert requirements.provenance.used_ai is False
        assert requirements.provenance.used_fallback is True
        assert requirements.provenance.confidence_tier is None

    @pytest.mark.asyncio
    async def test_empty_description(self, offline_client):
        requirements = await make_extractor(offline_client).extract("")
        assert requirements.required_skills == []
        assert requirements.keywords == []
        assert requirements.required_experience_years == 0
        assert requirements.education_requirement is None

    @pytest.mark.asyncio
    async def test_high_quality_ai(self, fake_client, sample_jd):
        client = fake_client(json.dumps(FULL_RESPONSE))
        requirements = await make_extractor(client).extract(sample_jd)

        assert requirements.required_skills == ["Python", "Django", "PostgreSQL", "redis"]
        assert requirements.preferred_skills[0] == "Kubernetes"
        assert requirements.keywords[:2] == ["backend", "python"]
        assert requirements.responsibilities == ["Build APIs"]
        assert requirements.provenance.used_ai is True
        assert requirements.provenance.used_fallback is False
        assert requirements.provenance.confidence_tier == "EXCELLENT"
        assert client.calls == 1
        assert sample_jd in client.prompts[0]

    @pytest.mark.asyncio
    async def test_incomplete_ai_is_supplemented(self, fake_client, sample_jd):
        response = {
            **FULL_RESPONSE,
            "preferredSkills": [],
            "keywords": [],
            "educationRequirement": None,
        }
        requirements = await make_extractor(fake_client(json.dumps(response))).extract(sample_jd)

        assert requirements.provenance.used_ai is True
        assert requirements.provenance.used_fallback is True
        assert requirements.education_requirement == "Bachelor's"
        assert requirements.keywords[:2] == ["backend", "python"]

    @pytest.mark.asyncio
    async def test_rejected_ai_output(self, fake_client, sample_jd):
        response = {
            "requiredSkills": "Python, Django",
            "preferredSkills": [],
            "requiredExperience": 5,
            "educationRequirement": None,
            "keywords": [],
        }
        requirements = await make_extractor(fake_client(json.dumps(response))).extract(sample_jd)

        provenance = requirements.provenance
        assert provenance.used_ai is False
        assert provenance.used_fallback is True
        assert provenance.confidence_tier == "ACCEPTABLE"
        assert provenance.ai_confidence == pytest.approx(0.4)
        assert "requiredSkills is not an array" in provenance.issues
        assert requirements.required_skills == ["python", "django", "postgresql", "redis"]
        assert requirements.responsibilities == []

    @pytest.mark.asyncio
    async def test_transport_failure_is_retried_then_falls_back(self, fake_client, sample_jd):
        client = fake_client(AITransportError("connection refused"))
        requirements = await make_extractor(client).extract(sample_jd)

        assert client.calls == 2
        assert requirements.provenance.confidence_tier == "POOR"
        assert requirements.provenance.issues == ["AI_TRANSPORT: connection refused"]
        assert requirements.required_skills == ["python", "django", "postgresql", "redis"]

    @pytest.mark.asyncio
    async def test_malformed_json(self, fake_client, sample_jd):
        requirements = await make_extractor(fake_client("I cannot help with that")).extract(sample_jd)
        assert requirements.provenance.issues[0].startswith("AI_INVALID_JSON")

    @pytest.mark.asyncio
    async def test_retry_recovers(self, fake_client, sample_jd):
        client = fake_client("garbage", json.dumps(FULL_RESPONSE))
        requirements = await make_extractor(client).extract(sample_jd)
        assert requirements.provenance.used_ai is True
        assert client.calls == 2

    @pytest.mark.asyncio
    async def test_timeout(self, fake_client, sample_jd):
        client = fake_client(json.dumps(FULL_RESPONSE), delay=1)
        extractor = make_extractor(client, timeout=0.01, retries=0)
        requirements = await extractor.extract(sample_jd)
        assert requirements.provenance.issues[0].startswith("AI_TIMEOUT")

    @pytest.mark.asyncio
    async def test_experience_is_clamped(self, fake_client, sample_jd):
        response = {**FULL_RESPONSE, "requiredExperience": 45}
        requirements = await make_extractor(fake_client(json.dumps(response))).extract(sample_jd)
        assert requirements.provenance.used_ai is True
        assert requirements.required_experience_years == 30
