import pytest

from tests._helpers.sse import parse_sse

pytestmark = pytest.mark.asyncio

URL = "/api/v1/portfolio/generate"
RESUME = "Jane Doe\nSenior Python engineer\nProjects: ledger, payments-api"


async def test_portfolio_streams_generated_code_unmodified(client, fake_llm, auth_headers):
    code = "```jsx\nexport default function Portfolio() {\n  return <main />\n}\n```"
    fake_llm.responses.update({"portfolio.parse": "PARSED", "portfolio.generate_code": code})

    resp = await client.post(URL, json={"content": RESUME, "style": "creative"}, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    assert fake_llm.ops == ["portfolio.parse", "portfolio.generate_code"]
    assert "Target style: creative" in fake_llm.prompt_for("portfolio.parse")

    events = parse_sse(resp.text)
    assert "".join(event["content"] for event in events[:-1]) == code
    assert events[-1] == {"type": "complete", "finalContent": code}


async def test_custom_message_and_default_style_reach_prompt(client, fake_llm, auth_headers):
    resp = await client.post(
        URL, json={"content": RESUME, "customMessage": "Keep it short"}, headers=auth_headers
    )

    assert resp.status_code == 200
    prompt = fake_llm.prompt_for("portfolio.parse")
    assert "Target style: minimal" in prompt
    assert "Keep it short" in prompt


async def test_parse_failure_streams_single_error(client, fake_llm, auth_headers):
    fake_llm.responses["portfolio.parse"] = RuntimeError("bad gateway")

    resp = await client.post(URL, json={"content": RESUME}, headers=auth_headers)

    assert fake_llm.ops == ["portfolio.parse"]
    assert parse_sse(resp.text) == [{"type": "error", "error": "Parsing failed: bad gateway"}]


@pytest.mark.parametrize(
    "body", [{}, {"content": ""}, {"content": None}, {"style": "modern"}]
)
async def test_missing_content_is_rejected(client, fake_llm, auth_headers, body):
    resp = await client.post(URL, json=body, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Content is required"
    assert fake_llm.calls == []


@pytest.mark.parametrize("style", [None, ""])
async def test_blank_style_falls_back_to_minimal(client, fake_llm, auth_headers, style):
    resp = await client.post(URL, json={"content": RESUME, "style": style}, headers=auth_headers)

    assert resp.status_code == 200
    assert "Target style: minimal" in fake_llm.prompt_for("portfolio.parse")
    assert parse_sse(resp.text)[-1]["type"] == "complete"


async def test_unknown_style_is_rejected(client, fake_llm, auth_headers):
    resp = await client.post(URL, json={"content": RESUME, "style": "baroque"}, headers=auth_headers)

    assert resp.status_code == 400
    assert "style" in resp.json()["details"]
    assert fake_llm.calls == []


async def test_oversized_content_is_rejected(client, fake_llm, auth_headers):
    resp = await client.post(URL, json={"content": "x" * 200_001}, headers=auth_headers)

    assert resp.status_code == 400
    assert fake_llm.calls == []
