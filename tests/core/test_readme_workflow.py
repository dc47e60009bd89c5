import asyncio

import pytest

from devboard.core.pipeline.state import PersonalInfo, ReadmeState
from devboard.core.readme import prompts
from devboard.core.readme.workflow import ReadmeWorkflow, build_readme_graph
from tests._helpers.fakes import FakeLLMClient


def new_state(**kwargs) -> ReadmeState:
    return ReadmeState.start(username="alice", **kwargs)


# Prompt builders


def test_analysis_prompt_for_new_readme_lists_fallbacks():
    state = new_state(personal_info=PersonalInfo(field="Backend Developer"))
    prompt = prompts.analysis_prompt(state)

    assert 'Analyze the username "alice"' in prompt
    assert "- Field: Backend Developer" in prompt
    assert "- Goals: Not specified" in prompt


def test_analysis_prompt_for_existing_readme_includes_content():
    state = new_state(current_content="# Old readme", is_new=False)
    prompt = prompts.analysis_prompt(state)

    assert prompt.startswith("Analyze this existing README content")
    assert "# Old readme" in prompt


def test_blank_existing_content_is_treated_as_new():
    state = new_state(current_content="   \n", is_new=False)

    assert state.is_new is True
    assert state.current_content is None
    assert 'Analyze the username "alice"' in prompts.analysis_prompt(state)


def test_generation_prompt_includes_widgets_and_defaults():
    state = new_state().model_copy(update={"analysis": "ANALYSIS"})
    prompt = prompts.generation_prompt(state)

    assert "Based on this analysis: ANALYSIS" in prompt
    assert "# Hi, I'm alice! 👋" in prompt
    assert "github-readme-stats.vercel.app/api?username=alice" in prompt
    assert "komarev.com/ghpvc/?username=alice" in prompt
    assert "- Field: Developer" in prompt
    assert "- Main Skills: Various technologies" in prompt


def test_generation_prompt_for_existing_readme_improves_it():
    state = new_state(current_content="# Old", is_new=False).model_copy(
        update={"analysis": "ANALYSIS"}
    )
    prompt = prompts.generation_prompt(state)

    assert "Improve this existing README content:\n# Old" in prompt


def test_review_prompt_embeds_generated_content():
    state = new_state().model_copy(update={"generated_content": "GENERATED"})
    prompt = prompts.review_prompt(state)

    assert prompt.startswith("Review and refine this generated README content")
    assert "GENERATED" in prompt


# Pipeline runs


async def test_happy_path_runs_three_steps_in_order():
    llm = FakeLLMClient(
        responses={
            "readme.analyze": "ANALYSIS",
            "readme.generate": "```markdown\nDRAFT\n```",
            "readme.review": "```markdown\n# Hi, I'm alice!\n```",
        }
    )

    result = await build_readme_graph(llm).run(new_state())

    assert llm.ops == ["readme.analyze", "readme.generate", "readme.review"]
    assert "ANALYSIS" in llm.prompt_for("readme.generate")
    assert "DRAFT" in llm.prompt_for("readme.review")
    assert result.analysis == "ANALYSIS"
    assert result.generated_content == "DRAFT"
    assert result.final_content == "# Hi, I'm alice!"
    assert result.error is None


async def test_analysis_failure_stops_after_first_step():
    llm = FakeLLMClient(responses={"readme.analyze": RuntimeError("rate limited")})

    result = await build_readme_graph(llm).run(new_state())

    assert llm.ops == ["readme.analyze"]
    assert result.error == "Analysis failed: rate limited"
    assert result.analysis is None
    assert result.generated_content is None
    assert result.final_content is None


async def test_generation_failure_skips_review():
    llm = FakeLLMClient(responses={"readme.generate": RuntimeError("boom")})

    result = await build_readme_graph(llm).run(new_state())

    assert llm.ops == ["readme.analyze", "readme.generate"]
    assert result.error == "Generation failed: boom"
    assert result.final_content is None


async def test_review_failure_is_labeled():
    llm = FakeLLMClient(responses={"readme.review": ValueError()})

    result = await build_readme_graph(llm).run(new_state())

    assert result.error == "Review failed: Unknown error"
    assert result.final_content is None


async def test_review_removes_fences_left_mid_document():
    llm = FakeLLMClient(
        responses={"readme.review": "# Title\n```\nstray\n```\nBody\n```"}
    )

    result = await build_readme_graph(llm).run(new_state())

    assert "```" not in result.final_content
    assert result.final_content.startswith("# Title")
    assert result.final_content.endswith("Body")


async def test_guarded_steps_propagate_existing_error():
    llm = FakeLLMClient()
    workflow = ReadmeWorkflow(llm)
    failed = new_state().model_copy(update={"error": "Analysis failed: x"})

    assert await workflow.generate(failed) == {"error": "Analysis failed: x"}
    assert await workflow.review(failed) == {"error": "Analysis failed: x"}
    assert llm.calls == []


async def test_slow_model_call_times_out_as_stage_error():
    llm = FakeLLMClient(delays={"readme.analyze": 1.0})

    result = await build_readme_graph(llm, timeout=0.01).run(new_state())

    assert result.error == "Analysis failed: timed out after 0.01s"


async def test_stop_probe_prevents_further_model_calls():
    llm = FakeLLMClient()
    stop = asyncio.Event()

    async def should_stop():
        return stop.is_set()

    async def on_step(name, state):
        if name == "analyze":
            stop.set()

    result = await build_readme_graph(llm).run(new_state(), should_stop=should_stop, on_step=on_step)

    assert llm.ops == ["readme.analyze"]
    assert result.cancelled is True
