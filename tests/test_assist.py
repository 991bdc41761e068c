"""Tests for generative assist — every path answers, even when the model cannot."""
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from clix.config import settings
from clix.services import assist_service


class _FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.prompts = []

    def create(self, model, messages):
        self.prompts.append(messages[0]["content"])
        if self.error:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


class _FakeImages:
    def __init__(self, data=None, error=None):
        self.data = data or []
        self.error = error

    def generate(self, model, prompt, n):
        if self.error:
            raise self.error
        return SimpleNamespace(data=self.data)


def _fake_client(completions=None, images=None):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions), images=images)


@pytest.fixture
def no_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")


class TestTextGeneration:
    def test_missing_key_falls_back(self, client, no_key):
        resp = client.post("/api/assist/text", json={"prompt": "Hackathon", "kind": "description"})
        assert resp.status_code == 200
        assert resp.json()["text"] == assist_service.MISSING_KEY_TEXT

    def test_prompt_per_kind(self, monkeypatch):
        completions = _FakeCompletions(content="  Code all night.  ")
        monkeypatch.setattr(assist_service, "_client", lambda: _fake_client(completions=completions))

        assert assist_service.generate_text("Hackathon", "tagline") == "Code all night."
        assert "tagline" in completions.prompts[0]
        assert '"Hackathon"' in completions.prompts[0]

    def test_api_error_falls_back(self, monkeypatch):
        completions = _FakeCompletions(error=OpenAIError("boom"))
        monkeypatch.setattr(assist_service, "_client", lambda: _fake_client(completions=completions))
        assert assist_service.generate_text("Hackathon") == assist_service.ERROR_TEXT

    def test_empty_answer_falls_back(self, monkeypatch):
        completions = _FakeCompletions(content="")
        monkeypatch.setattr(assist_service, "_client", lambda: _fake_client(completions=completions))
        assert assist_service.generate_text("Hackathon") == assist_service.EMPTY_TEXT

    def test_unknown_kind_rejected_by_api(self, client):
        resp = client.post("/api/assist/text", json={"prompt": "Hackathon", "kind": "limerick"})
        assert resp.status_code == 422


class TestReport:
    def test_report_prompt_uses_stats_and_feedback(self, client, campus, monkeypatch):
        event_id = campus["event"]["event_id"]  # price 100
        student_id = campus["student"]["user_id"]
        client.post(f"/api/events/{event_id}/register", json={"user_id": student_id})
        client.post(f"/api/events/{event_id}/feedback", json={
            "user_id": student_id, "rating": 5, "comment": "Loved the talks",
        })

        completions = _FakeCompletions(content="# Report")
        monkeypatch.setattr(assist_service, "_client", lambda: _fake_client(completions=completions))
        resp = client.post(f"/api/assist/report/{event_id}")

        assert resp.json()["text"] == "# Report"
        prompt = completions.prompts[0]
        assert "Registrations: 1 / 2" in prompt
        assert "Revenue: 100" in prompt
        assert "Loved the talks" in prompt

    def test_report_missing_event(self, client):
        assert client.post("/api/assist/report/nope").status_code == 404


class TestImageGeneration:
    def test_missing_key_returns_null(self, client, no_key):
        resp = client.post("/api/assist/image", json={"prompt": "poster"})
        assert resp.status_code == 200
        assert resp.json()["image"] is None

    def test_b64_becomes_data_url(self, monkeypatch):
        images = _FakeImages(data=[SimpleNamespace(b64_json="aGVsbG8=", url=None)])
        monkeypatch.setattr(assist_service, "_client", lambda: _fake_client(images=images))
        assert assist_service.generate_image("poster") == "data:image/png;base64,aGVsbG8="

    def test_hosted_url_passed_through(self, monkeypatch):
        images = _FakeImages(data=[SimpleNamespace(b64_json=None, url="https://img.example/p.png")])
        monkeypatch.setattr(assist_service, "_client", lambda: _fake_client(images=images))
        assert assist_service.generate_image("poster") == "https://img.example/p.png"

    def test_api_error_returns_none(self, monkeypatch):
        images = _FakeImages(error=OpenAIError("quota"))
        monkeypatch.setattr(assist_service, "_client", lambda: _fake_client(images=images))
        assert assist_service.generate_image("poster") is None
