"""Tests for the strategy library and the basic fallback transform."""

import pytest

from prompt_autotuner.strategies import (
    DETAIL_SUFFIX,
    ROLE_PREFIX,
    STRATEGY_LIBRARY,
    apply_strategy,
    basic_optimization,
    get_strategy,
)


def test_library_order():
    """The first three strategies are the ones auto-optimization tries."""
    assert [s.focus for s in STRATEGY_LIBRARY] == [
        "clarity",
        "examples",
        "structure",
        "constraints",
        "hybrid",
    ]
    assert len({s.id for s in STRATEGY_LIBRARY}) == len(STRATEGY_LIBRARY)


@pytest.mark.parametrize("strategy", STRATEGY_LIBRARY, ids=lambda s: s.id)
def test_transforms_are_pure_and_keep_prompt(strategy):
    """Applying a strategy twice gives identical text containing the original prompt."""
    prompt = "Summarize this article about coral reefs."

    first = apply_strategy(prompt, strategy)
    second = apply_strategy(prompt, strategy)

    assert first == second
    assert prompt in first
    assert first != prompt


def test_clarity_appends_instructions():
    """Clarity leaves the prompt first and appends precision instructions."""
    result = apply_strategy("Explain recursion.", get_strategy("clarity-focus"))

    assert result.startswith("Explain recursion.\n\n")
    assert "Please be precise and specific" in result


def test_structure_wraps_prompt_in_steps():
    """Structure embeds the prompt in a numbered task list."""
    result = apply_strategy("Explain recursion.", get_strategy("structure-optimization"))

    assert result.startswith("You are an expert assistant. Your task is to:")
    assert "1. Understand the request: Explain recursion." in result


def test_get_strategy_unknown_id():
    """Unknown ids raise KeyError."""
    with pytest.raises(KeyError):
        get_strategy("does-not-exist")


def test_basic_optimization_short_prompt():
    """A short prompt without a role gets both a role and a detail request."""
    optimized, changes = basic_optimization("Summarize this.")

    assert optimized == ROLE_PREFIX + "Summarize this." + DETAIL_SUFFIX
    assert len(changes) == 1
    assert changes[0].type == "modification"
    assert changes[0].description == "Enhanced structure and clarity"


def test_basic_optimization_long_prompt_with_role():
    """A long prompt that already has a role is returned unchanged."""
    prompt = "You are a careful editor. " + "Fix grammar and spelling in the text. " * 4

    optimized, changes = basic_optimization(prompt)

    assert optimized == prompt
    assert changes == []


def test_basic_optimization_long_prompt_without_role():
    """A long prompt only gains the role prefix."""
    prompt = "Fix grammar and spelling in the text below and keep the meaning intact. " * 2

    optimized, _ = basic_optimization(prompt)

    assert optimized == ROLE_PREFIX + prompt
