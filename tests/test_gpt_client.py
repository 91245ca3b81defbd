# tests/test_gpt_client.py
import json

import pytest
import requests

from cvpress import gpt_client
from cvpress.gpt_client import (
    GenerationError,
    GPTClient,
    GPTConfig,
    generate_cv_from_transcript,
    generate_hiring_documents,
    interview_system_prompt,
    parse_generated_content,
)
from cvpress.models import ChatMessage, HiringRequest

CONFIG = GPTConfig(endpoint="https://example.azure.com", key="k", deployment="gpt")


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "json": json})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def completion(content):
    return FakeResponse(200, {"choices": [{"message": {"content": content}}]})


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(gpt_client.time, "sleep", lambda s: None)


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("AZURE_FOUNDRY_ENDPOINT", "https://x.azure.com/")
    monkeypatch.setenv("AZURE_FOUNDRY_KEY", "secret")
    monkeypatch.setenv("AZURE_DEPLOYMENT_NAME", "gpt-4o")
    monkeypatch.delenv("AZURE_API_VERSION", raising=False)
    cfg = GPTConfig.from_env()
    assert cfg.url == "https://x.azure.com/openai/deployments/gpt-4o/chat/completions?api-version=2025-01-01-preview"


def test_config_missing(monkeypatch):
    monkeypatch.delenv("AZURE_FOUNDRY_KEY", raising=False)
    with pytest.raises(GenerationError):
        GPTConfig.from_env()


def test_chat_completion_sends_key_and_strips():
    session = FakeSession([completion("  hello  ")])
    client = GPTClient(CONFIG, session=session)
    assert client.chat_completion([{"role": "user", "content": "hi"}], max_tokens=5) == "hello"
    sent = session.requests[0]
    assert sent["headers"]["api-key"] == "k"
    assert sent["json"]["max_tokens"] == 5


def test_retries_then_succeeds():
    session = FakeSession([
        FakeResponse(429),
        requests.exceptions.ConnectionError("down"),
        completion("ok"),
    ])
    assert GPTClient(CONFIG, session=session).chat_completion([]) == "ok"
    assert len(session.requests) == 3


def test_gives_up_after_retries():
    session = FakeSession([FakeResponse(503)] * 3)
    with pytest.raises(GenerationError, match="unreachable"):
        GPTClient(CONFIG, session=session).chat_completion([])


def test_client_error_is_not_retried():
    session = FakeSession([FakeResponse(401, {"error": "bad key"})])
    with pytest.raises(GenerationError, match="401"):
        GPTClient(CONFIG, session=session).chat_completion([])
    assert len(session.requests) == 1


def test_empty_choices():
    session = FakeSession([FakeResponse(200, {"choices": []})])
    with pytest.raises(GenerationError):
        GPTClient(CONFIG, session=session).chat_completion([])


GENERATED = {
    "coverLetter": "Dear team,",
    "revampedCV": "PROFESSIONAL SUMMARY\nExperienced engineer.",
    "linkedinMessage": "Hi!",
    "scores": {
        "jobFit": {"score": 82, "summary": "Strong match"},
        "company": {"score": 70, "summary": "Good reviews"},
        "ats": {"score": 90, "summary": "Clean layout"},
    },
}


@pytest.mark.parametrize("wrap", ["{}", "```json\n{}\n```", "```\n{}\n```"])
def test_parse_generated_content_handles_fences(wrap):
    content = parse_generated_content(wrap.replace("{}", json.dumps(GENERATED)))
    assert content.revamped_cv.startswith("PROFESSIONAL SUMMARY")
    assert content.scores["ats"].score == 90


def test_parse_generated_content_rejects_garbage():
    with pytest.raises(GenerationError):
        parse_generated_content("not json")
    with pytest.raises(GenerationError):
        parse_generated_content("[1, 2]")
    with pytest.raises(GenerationError, match="not a number"):
        parse_generated_content(json.dumps({"revampedCV": "X", "scores": {"ats": {"score": "85/100"}}}))
    with pytest.raises(GenerationError, match="not an object"):
        parse_generated_content(json.dumps({"revampedCV": "X", "scores": [{"score": 1}]}))


def test_generate_hiring_documents(jane):
    session = FakeSession([completion(json.dumps(GENERATED))])
    request = HiringRequest(details=jane, cv_text="old cv", job_description="Build APIs",
                            job_title="Backend Engineer", company_name="Globex")
    content = generate_hiring_documents(GPTClient(CONFIG, session=session), request)
    assert content.cover_letter == "Dear team,"

    messages = session.requests[0]["json"]["messages"]
    assert "Full Name: Jane Doe" in messages[0]["content"]
    assert "Globex" in messages[0]["content"]
    assert "ALL CAPS" in messages[0]["content"]
    assert messages[1]["content"].endswith("old cv")


def test_generate_cv_from_transcript():
    session = FakeSession([completion("SKILLS\nPython")])
    msgs = [ChatMessage("model", "What is your name?"), ChatMessage("user", "Jane")]
    cv = generate_cv_from_transcript(GPTClient(CONFIG, session=session), msgs)
    assert cv == "SKILLS\nPython"
    prompt = session.requests[0]["json"]["messages"][0]["content"]
    assert "Interviewer: What is your name?\nCandidate: Jane" in prompt


def test_interview_system_prompt_language():
    prompt = interview_system_prompt("Bahasa Indonesia")
    assert "entire interview in Bahasa Indonesia" in prompt
    assert prompt.endswith("Terima kasih! Saya memiliki semua informasi yang dibutuhkan untuk membuat CV Anda.'")
