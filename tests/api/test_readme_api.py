import pytest

from tests._helpers.sse import parse_sse

pytestmark = pytest.mark.asyncio

URL = "/api/v1/readme/generate"


async def test_new_readme_streams_reviewed_content(client, fake_llm, auth_headers):
    final = "# Hi, I'm alice! 👋\n\n## About Me\nBackend developer building APIs."
    fake_llm.responses.update(
        {
            "readme.analyze": "ANALYSIS",
            "readme.generate": "DRAFT",
            "readme.review": f"```markdown\n{final}\n```",
        }
    )

    resp = await client.post(
        URL,
        json={"username": "alice", "isNew": True, "personalInfo": {"field": "Backend Developer"}},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    assert resp.headers["cache-control"] == "no-cache"
    assert resp.headers["connection"] == "keep-alive"

    assert fake_llm.ops == ["readme.analyze", "readme.generate", "readme.review"]
    assert 'Analyze the username "alice"' in fake_llm.prompt_for("readme.analyze")
    assert "Backend Developer" in fake_llm.prompt_for("readme.analyze")
    assert "Create a comprehensive GitHub profile README" in fake_llm.prompt_for("readme.generate")
    assert "Review and refine this generated README content" in fake_llm.prompt_for("readme.review")

    events = parse_sse(resp.text)
    *chunks, last = events
    assert all(event["type"] == "content" for event in chunks)
    assert all(len(event["content"]) <= 10 for event in chunks)
    assert "".join(event["content"] for event in chunks) == final
    assert last == {"type": "complete", "finalContent": final}


async def test_editing_existing_readme_uses_improvement_prompts(client, fake_llm, auth_headers):
    resp = await client.post(
        URL,
        json={"username": "alice", "isNew": False, "currentContent": "# Old README"},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert fake_llm.prompt_for("readme.analyze").startswith("Analyze this existing README content")
    assert "Improve this existing README content" in fake_llm.prompt_for("readme.generate")
    assert parse_sse(resp.text)[-1]["type"] == "complete"


async def test_generation_failure_ends_stream_with_error(client, fake_llm, auth_headers):
    fake_llm.responses["readme.generate"] = RuntimeError("upstream 503")

    resp = await client.post(URL, json={"username": "alice", "isNew": True}, headers=auth_headers)

    assert resp.status_code == 200
    assert fake_llm.ops == ["readme.analyze", "readme.generate"]
    assert parse_sse(resp.text) == [{"type": "error", "error": "Generation failed: upstream 503"}]


async def test_missing_username_is_rejected_before_any_model_call(client, fake_llm, auth_headers):
    resp = await client.post(URL, json={"isNew": True}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Username is required"
    assert fake_llm.calls == []


@pytest.mark.parametrize("username", ["", None])
async def test_empty_username_is_rejected(client, fake_llm, auth_headers, username):
    resp = await client.post(URL, json={"username": username, "isNew": True}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Username is required"
    assert fake_llm.calls == []


async def test_malformed_json_is_rejected_without_streaming(client, fake_llm, auth_headers):
    resp = await client.post(
        URL,
        content=b'{"username": "alice", "isNew": tru',
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.headers["content-type"].startswith("application/json")
    assert "data:" not in resp.text
    assert resp.json()["error"] == "Invalid JSON body"
    assert fake_llm.calls == []


async def test_schema_mismatch_reports_details(client, fake_llm, auth_headers):
    resp = await client.post(
        URL, json={"username": "alice", "isNew": "sometimes"}, headers=auth_headers
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid request"
    assert "isNew" in body["details"]
    assert fake_llm.calls == []
