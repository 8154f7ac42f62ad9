import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from schemas import FormattingCheck, Recommendation
from storage import Storage, make_engine


class FakeOracle:
    """Deterministic stand-in for the LLM: keywords are looked up by text."""

    def __init__(self, keywords=None, recommendations=None, checks=None, fail=()):
        self.keywords = keywords or {}
        self.recommendations = recommendations or []
        self.checks = checks or []
        self.fail = set(fail)
        self.calls = []

    def _maybe_fail(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise RuntimeError(f"{name} is down")

    def extract_keywords(self, text):
        self._maybe_fail("extract_keywords")
        return list(self.keywords.get(text, []))

    def generate_recommendations(self, resume_text, jd_text, missing_keywords):
        self._maybe_fail("generate_recommendations")
        self.last_missing = list(missing_keywords)
        return list(self.recommendations)

    def analyze_formatting(self, resume_text):
        self._maybe_fail("analyze_formatting")
        return list(self.checks)


RESUME_TEXT = (
    "Jane Doe\nSummary\nBackend engineer.\nExperience\n- Built Python services with React front ends.\n"
    "Skills\nPython, React, SQL\nEducation\nBSc Computer Science\n"
)
JD_TEXT = "Senior engineer. Must know Python, Docker and React. Strong leadership."


@pytest.fixture
def clock():
    start = datetime(2026, 1, 1, 12, 0, 0)
    ticks = itertools.count()
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def storage(clock):
    s = Storage(make_engine("sqlite://"), clock=clock)
    s.create_all()
    return s


@pytest.fixture
def oracle():
    return FakeOracle(
        keywords={
            RESUME_TEXT: ["python", "react"],
            JD_TEXT: ["Python", "Docker", "React", "leadership"],
        },
        recommendations=[
            Recommendation(title="Add Docker", description="Mention container work.", priority="High", category="keywords"),
        ],
        checks=[FormattingCheck(name="Standard headers", status="passed")],
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(llm_api_key="test-key", base_dir=str(tmp_path), llm_timeout=5)


@pytest.fixture
def client(settings, storage, oracle):
    app = create_app(settings=settings, storage=storage, oracle=oracle)
    with TestClient(app) as c:
        yield c
