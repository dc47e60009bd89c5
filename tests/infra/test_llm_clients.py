import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.outputs import ChatGeneration, LLMResult
from langchain_openai import ChatOpenAI

from devboard.infra.config.settings import Settings
from devboard.infra.llm.callbacks import token_usage
from devboard.infra.llm.langchain_client import LangChainClient, _content_text, build_chat_model
from devboard.infra.llm.mock_client import MockLLMClient


def settings(**overrides) -> Settings:
    return Settings().model_copy(update=overrides)


def test_build_chat_model_defaults_to_openai():
    llm = build_chat_model(settings(llm_provider="openai", openai_model="gpt-4o-mini"))

    assert isinstance(llm, ChatOpenAI)
    assert llm.model_name == "gpt-4o-mini"
    assert llm.max_retries == 0


def test_build_chat_model_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unsupported LLM provider"):
        build_chat_model(settings(llm_provider="llama-on-a-toaster"))


def test_content_text_joins_text_parts():
    parts = [{"type": "text", "text": "Hel"}, {"type": "image_url"}, "lo"]
    assert _content_text(parts) == "Hello"
    assert _content_text(None) == ""


async def test_langchain_client_invoke_returns_text():
    client = LangChainClient(FakeListChatModel(responses=["# README"]))

    text = await client.invoke_text(client.create_messages("write", "system"), op="readme.generate")

    assert text == "# README"


async def test_langchain_client_stream_yields_fragments():
    client = LangChainClient(FakeListChatModel(responses=["hello"]))

    pieces = [piece async for piece in client.stream_text(client.create_messages("hi"))]

    assert "".join(pieces) == "hello"
    assert len(pieces) > 1


def test_create_messages_orders_system_first():
    messages = MockLLMClient().create_messages("user text", "system text")

    assert [m.type for m in messages] == ["system", "human"]
    assert messages[-1].content == "user text"


async def test_mock_client_answers_per_operation():
    client = MockLLMClient()
    messages = client.create_messages('Create a README for username "alice".')

    readme = await client.invoke_text(messages, op="readme.review")
    analysis = await client.invoke_text(messages, op="readme.analyze")
    code = await client.invoke_text(messages, op="portfolio.generate_code")

    assert readme.startswith("# Hi, I'm alice! 👋")
    assert "alice" in analysis
    assert "export default function Portfolio" in code


async def test_mock_client_stream_reassembles_invoke_output():
    client = MockLLMClient()
    messages = client.create_messages("anything")

    full = await client.invoke_text(messages, op="llm.generate")
    pieces = [piece async for piece in client.stream_text(messages, op="llm.generate")]

    assert "".join(pieces) == full


def test_dummy_key_selects_mock_client():
    from devboard.api.dependencies import _shared_llm_client

    _shared_llm_client.cache_clear()
    try:
        assert isinstance(_shared_llm_client(), MockLLMClient)
    finally:
        _shared_llm_client.cache_clear()


def test_token_usage_prefers_llm_output():
    result = LLMResult(
        generations=[],
        llm_output={"token_usage": {"prompt_tokens": 12, "completion_tokens": 30}},
    )
    assert token_usage(result) == (12, 30)


def test_token_usage_reads_message_metadata():
    message = AIMessage(
        content="hi",
        usage_metadata={"input_tokens": 5, "output_tokens": 7, "total_tokens": 12},
    )
    result = LLMResult(generations=[[ChatGeneration(message=message)]])
    assert token_usage(result) == (5, 7)
