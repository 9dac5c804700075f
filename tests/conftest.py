from types import SimpleNamespace

import pytest

from zenstudy.models import QuizQuestion

OPTION_KEYS = ("a", "b", "c", "d", "e")


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    return str(tmp_path / "test_zenstudy.db")


class FakeModels:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return SimpleNamespace(text=response)


class FakeClient:
    """Stands in for genai.Client; replies with canned texts or raises."""

    def __init__(self, *responses):
        self.models = FakeModels(responses)


@pytest.fixture
def make_client():
    return FakeClient


def build_question(correct="a", topic="Topic", prompt="Question?"):
    return QuizQuestion(
        topic=topic,
        prompt=prompt,
        options={k: f"Option {k}" for k in OPTION_KEYS},
        correct_key=correct,
        explanation="Because.",
        source="Board",
    )


@pytest.fixture
def make_question():
    return build_question


@pytest.fixture
def five_questions():
    return [build_question(correct=k, topic=f"T{k}") for k in OPTION_KEYS]
