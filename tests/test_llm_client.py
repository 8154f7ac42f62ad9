import json
from unittest import mock

import pytest
import requests

from config import ConfigError, Settings
from matching.llm_client import LLMClient, clean_keywords


def reply(content, status=200):
    response = mock.Mock()
    response.status_code = status
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    else:
        response.raise_for_status.return_value = None
    if not isinstance(content, str):
        content = json.dumps(content)
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


def make_client(*responses):
    session = mock.Mock(spec=requests.Session)
    session.post.side_effect = list(responses)
    client = LLMClient(api_key="k", model="m", base_url="https://llm.example/v1/", timeout=3, session=session)
    return client, session


def test_extract_keywords_request_and_cleanup():
    client, session = make_client(reply({"keywords": ["Python", " python ", "", 7, "Docker"]}))
    assert client.extract_keywords("some text") == ["Python", "Docker"]

    url = session.post.call_args.args[0]
    kwargs = session.post.call_args.kwargs
    assert url == "https://llm.example/v1/chat/completions"
    assert kwargs["headers"]["Authorization"] == "Bearer k"
    assert kwargs["timeout"] == 3
    assert kwargs["json"]["model"] == "m"
    assert kwargs["json"]["response_format"] == {"type": "json_object"}
    assert "some text" in kwargs["json"]["messages"][1]["content"]


@pytest.mark.parametrize("response", [
    reply("not json at all"),
    reply(["a", "b"]),
    reply({"keywords": "python"}),
    reply({"keywords": []}, status=500),
])
def test_extract_keywords_fails_soft(response):
    client, _ = make_client(response)
    assert client.extract_keywords("text") == []


def test_transport_error_fails_soft():
    client, _ = make_client(requests.ConnectionError("refused"))
    assert client.extract_keywords("text") == []
    client, _ = make_client(requests.Timeout("slow"))
    assert client.analyze_formatting("text") == []


def test_missing_choices_fails_soft():
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {"error": "quota"}
    client, _ = make_client(response)
    assert client.generate_recommendations("r", "j", []) == []


def test_recommendations_are_validated_and_normalized():
    client, session = make_client(reply({"recommendations": [
        {"title": "Add Docker", "description": "Mention containers.", "priority": "high", "category": "keywords"},
    ]}))
    recs = client.generate_recommendations("resume", "jd", ["Docker", "AWS"])
    assert recs[0].priority == "High"
    assert recs[0].category == "keywords"
    assert "Docker, AWS" in session.post.call_args.kwargs["json"]["messages"][1]["content"]


def test_bad_recommendation_priority_falls_back_to_empty():
    client, _ = make_client(reply({"recommendations": [
        {"title": "x", "description": "y", "priority": "urgent"},
    ]}))
    assert client.generate_recommendations("resume", "jd", []) == []


def test_formatting_checks_are_validated():
    client, _ = make_client(reply({"checks": [
        {"name": "Headers", "status": "PASSED"},
        {"name": "Tables", "status": "warning", "message": "Avoid tables"},
    ]}))
    checks = client.analyze_formatting("resume")
    assert [(c.name, c.status, c.message) for c in checks] == [
        ("Headers", "passed", None),
        ("Tables", "warning", "Avoid tables"),
    ]


def test_clean_keywords():
    assert clean_keywords(["SQL", "sql", None, "  ", "Go"]) == ["SQL", "Go"]


def test_from_settings_requires_api_key():
    with pytest.raises(ConfigError):
        LLMClient.from_settings(Settings())
    client = LLMClient.from_settings(Settings(llm_api_key="abc", llm_base_url="https://x/v1"))
    assert client.url == "https://x/v1/chat/completions"
