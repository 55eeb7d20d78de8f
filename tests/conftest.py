"""Shared fixtures: sample model outputs, a fake text generator, and an API client."""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app

PRESENTATION = (
    "A 45 year old man presents with chest pain radiating to the jaw and diaphoresis."
)
QUESTION = (
    "What is the most appropriate next investigation, and why is it urgent in this presentation?"
)
ANSWER = (
    "The most likely diagnosis is acute coronary syndrome; obtain a 12-lead ECG immediately "
    "and serial troponins; this matters because early reperfusion reduces mortality."
)

LONG_TEXT = f"Scenario 1: {PRESENTATION}\n\nQuestion: {QUESTION}\n\nAnswer: {ANSWER}"

SBA_QUESTION = (
    "What is the most appropriate next step?\n"
    "A) Aspirin\nB) ECG\nC) Troponin\nD) Oxygen\nE) Morphine"
)
SBA_ANSWER = "The correct answer is B) ECG because it must be obtained within ten minutes of arrival."

OSCE_ANSWER = (
    "Assess the patient systematically and summarise the key teaching points for the examiner.\n"
    "Marking Criteria:\n"
    "- Checks airway\n"
    "- Checks breathing\n"
    "- Checks circulation\n"
    "- Assesses GCS\n"
    "- Documents findings"
)


def scenario_text(scenario_id, presentation=PRESENTATION, question=QUESTION, answer=ANSWER):
    return f"Scenario {scenario_id}: {presentation}\n\nQuestion: {question}\n\nAnswer: {answer}"


class FakeGenerator:
    """Returns a canned response (or raises) and records the prompts it saw."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def fake_generator():
    return FakeGenerator(text=LONG_TEXT)


@pytest.fixture
def settings():
    return Settings(
        GEMINI_API_KEY=None,
        ALLOWED_ORIGINS=["http://localhost:5173"],
        FRONTEND_URL="https://medscena.example.com",
        RATE_LIMIT_WINDOW_SECONDS=60,
        RATE_LIMIT_MAX_REQUESTS=3,
        MAX_SCENARIOS_PER_REQUEST=5,
    )


@pytest.fixture
def client(settings, fake_generator):
    app = create_app(settings=settings, generator=fake_generator)
    with TestClient(app) as test_client:
        yield test_client
