"""Shared test configuration, sample documents and fake AI clients."""

import asyncio

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: runs the full pipeline through the HTTP layer"
    )


SAMPLE_RESUME = """John Doe
john.doe@email.com | (555) 123-4567
linkedin.com/in/johndoe | github.com/johndoe

Summary
Software engineer with 5+ years of experience building web applications.

Experience
Senior Software Engineer | TechCorp | Jan 2021 - Present
• Built REST APIs in Python and Django serving 1M requests/day
• Deployed Docker containers and led a team of 5 engineers

Software Engineer | StartupXYZ | 2019 - 2021
• Developed React frontend components

Education
B.S. Computer Science | State University | 2019

Skills
Python, JavaScript, React, Docker, AWS, PostgreSQL, Git
"""

SAMPLE_JD = """Senior Backend Engineer

Requirements:
- 5+ years of experience building backend services
- Strong Python and Django skills
- PostgreSQL and Redis

Nice to have:
- Kubernetes
- GraphQL

Education:
Bachelor's degree in Computer Science required.

About us:
We use Python and Docker every day.
"""


class FakeClient:
    """Stands in for GeminiClient. Replays responses (or raises exceptions) in order."""

    is_available = True

    def __init__(self, *responses, delay: float = 0.0):
        self.responses = list(responses)
        self.delay = delay
        self.calls = 0
        self.prompts: list[str] = []

    async def generate(self, prompt, temperature=0.3, max_output_tokens=2000):
        self.calls += 1
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        item = self.responses[min(self.calls, len(self.responses)) - 1]
        if isinstance(item, Exception):
            raise item
        return item


class OfflineClient:
    is_available = False

    async def generate(self, prompt, temperature=0.3, max_output_tokens=2000):
        raise AssertionError("offline client must not be called")


@pytest.fixture
def sample_resume():
    return SAMPLE_RESUME


@pytest.fixture
def sample_jd():
    return SAMPLE_JD


@pytest.fixture
def fake_client():
    """Factory: fake_client(response, ...) -> FakeClient."""
    return FakeClient


@pytest.fixture
def offline_client():
    return OfflineClient()
