"""Tests for running prompts against models and benchmarks."""

import asyncio
import random

import pytest

from prompt_autotuner.connectors import FunctionConnector
from prompt_autotuner.evaluation import ModelEvaluationClient, compose_with_input
from prompt_autotuner.evaluation.benchmarks import OPTION_LETTERS, get_dataset
from prompt_autotuner.tests.helpers import DummyConnector, assert_metrics_in_range
from prompt_autotuner.types import BenchmarkConfig, BenchmarkName, ModelConfig


def answer_correctly(model_name, prompt, params):
    """Answer every bundled benchmark question with its correct letter."""
    for benchmark in BenchmarkName:
        for question in get_dataset(benchmark):
            if question.question in prompt:
                return f"Answer: {OPTION_LETTERS[question.correct_answer]}"
    return "Answer: A"


@pytest.mark.asyncio
async def test_one_result_per_enabled_model(dummy_connector, config, models):
    """Disabled models are skipped and order follows the configuration."""
    client = ModelEvaluationClient(dummy_connector, config)

    results = await client.evaluate_models("Summarize this.", models, sample_size=3)

    assert [r.model for r in results] == ["model-a", "model-b"]
    assert all(r.total_samples == 3 for r in results)
    assert all(len(r.responses) == 3 for r in results)
    assert_metrics_in_range(results)
    assert dummy_connector.call_count == 6


@pytest.mark.asyncio
async def test_structured_prompt_scores_higher_structure(dummy_connector, config):
    """Prompts asking for structure get better organized answers."""
    client = ModelEvaluationClient(dummy_connector, config)
    model = [ModelConfig(name="model-a")]

    flat = await client.evaluate_models("Summarize this.", model)
    structured = await client.evaluate_models("Summarize this. Use a clear structure.", model)

    assert structured[0].structure_score > flat[0].structure_score


@pytest.mark.asyncio
async def test_failing_model_is_marked_unusable(config, models):
    """A model whose calls all fail does not affect the others."""
    connector = DummyConnector(failing_models={"model-b"})
    client = ModelEvaluationClient(connector, config)

    results = await client.evaluate_models("Summarize this.", models, sample_size=2)

    assert results[0].usable
    assert results[1].model == "model-b"
    assert results[1].total_samples == 0
    assert not results[1].usable


@pytest.mark.asyncio
async def test_partial_sample_failures_are_dropped(config):
    """Failed samples are excluded instead of failing the model."""
    calls = 0

    def flaky(model_name, prompt, params):
        nonlocal calls
        calls += 1
        if calls % 2 == 0:
            raise RuntimeError("transient failure")
        return "A steady answer."

    client = ModelEvaluationClient(FunctionConnector(flaky), config)

    results = await client.evaluate_models("Summarize this.", [ModelConfig(name="m")], 4)

    assert results[0].total_samples == 2


@pytest.mark.asyncio
async def test_slow_model_times_out(config):
    """Completions slower than the request timeout count as failures."""
    connector = DummyConnector(delay_seconds=0.5)
    fast_config = config.model_copy(update={"request_timeout_seconds": 0.05})
    client = ModelEvaluationClient(connector, fast_config)

    results = await client.evaluate_models("Summarize this.", [ModelConfig(name="slow")])

    assert results[0].total_samples == 0


@pytest.mark.asyncio
async def test_concurrency_is_bounded(config):
    """No more than max_concurrent_requests calls are in flight."""
    in_flight = 0
    peak = 0

    async def tracked(model_name, prompt, params):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return "done"

    limited = config.model_copy(update={"max_concurrent_requests": 2})
    client = ModelEvaluationClient(FunctionConnector(tracked), limited)

    await client.evaluate_models("p", [ModelConfig(name="a"), ModelConfig(name="b")], 5)

    assert peak == 2


@pytest.mark.asyncio
async def test_model_params_are_forwarded(config):
    """Per-model sampling settings reach the connector."""
    seen = []

    def record(model_name, prompt, params):
        seen.append((model_name, params.temperature, params.max_tokens))
        return "ok"

    client = ModelEvaluationClient(FunctionConnector(record), config)
    model = ModelConfig(name="m", temperature=0.2, max_tokens=50)

    await client.evaluate_models("p", [model])

    assert seen == [("m", 0.2, 50)]


def test_compose_with_input():
    """The input replaces a placeholder or is appended."""
    assert compose_with_input("Translate: {input}", "hola") == "Translate: hola"
    assert compose_with_input("Translate this.", "hola") == "Translate this.\n\nInput:\nhola"


@pytest.mark.asyncio
async def test_evaluate_with_input(dummy_connector, config):
    client = ModelEvaluationClient(dummy_connector, config)

    await client.evaluate_with_input("Translate: {input}", "hola", [ModelConfig(name="m")])

    assert dummy_connector.calls == [("m", "Translate: hola")]


@pytest.mark.asyncio
async def test_benchmarks_count_correct_answers(config):
    """Correct letters are tallied per benchmark and category."""
    client = ModelEvaluationClient(
        FunctionConnector(answer_correctly), config, rng=random.Random(1)
    )
    benchmarks = [
        BenchmarkConfig(name=BenchmarkName.MMLU, sample_size=3),
        BenchmarkConfig(name=BenchmarkName.TRUTHFULQA, full_dataset=True),
        BenchmarkConfig(name=BenchmarkName.HELLASWAG, enabled=False),
    ]

    results = await client.evaluate_benchmarks("You are a quiz expert.", benchmarks)

    assert [r.benchmark for r in results] == [BenchmarkName.MMLU, BenchmarkName.TRUTHFULQA]
    assert results[0].total_questions == 3
    assert results[0].accuracy == 1.0
    assert results[1].total_questions == len(get_dataset(BenchmarkName.TRUTHFULQA))
    assert set(results[1].category_breakdown.values()) == {1.0}


@pytest.mark.asyncio
async def test_benchmark_prompt_is_system_prompt(config):
    """The prompt under test is sent as the system prompt of the solver."""
    system_prompts = []

    def record(model_name, prompt, params):
        system_prompts.append(params.system_prompt)
        return "Answer: A"

    client = ModelEvaluationClient(FunctionConnector(record), config)

    await client.evaluate_benchmarks(
        "You are a quiz expert.", [BenchmarkConfig(name=BenchmarkName.MMLU, sample_size=2)]
    )

    assert len(system_prompts) == 2
    assert all(p.startswith("You are a quiz expert.") for p in system_prompts)


@pytest.mark.asyncio
async def test_failed_questions_count_as_incorrect(config):
    def broken(model_name, prompt, params):
        raise RuntimeError("backend down")

    client = ModelEvaluationClient(FunctionConnector(broken), config)

    results = await client.evaluate_benchmarks(
        "p", [BenchmarkConfig(name=BenchmarkName.MMLU, sample_size=2)]
    )

    assert results[0].total_questions == 2
    assert results[0].correct_answers == 0
    assert results[0].accuracy == 0.0


@pytest.mark.asyncio
async def test_benchmark_without_dataset_is_empty(config):
    client = ModelEvaluationClient(FunctionConnector(answer_correctly), config)

    results = await client.evaluate_benchmarks(
        "p", [BenchmarkConfig(name=BenchmarkName.HUMANEVAL)]
    )

    assert results[0].total_questions == 0
    assert results[0].accuracy == 0.0
