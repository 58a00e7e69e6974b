"""Fixed library of deterministic prompt-rewriting strategies.

Every transform is a pure function of the input prompt: the same input
always produces byte-identical output.
"""

from collections.abc import Callable

from prompt_autotuner.types import AutoOptimizationStrategy, Change

CLARITY = AutoOptimizationStrategy(
    id="clarity-focus",
    name="Clarity Enhancement",
    description="Improve prompt clarity and specificity",
    focus="clarity",
    prompt_modifications=(
        "Add specific instructions",
        "Remove ambiguous language",
        "Clarify expected output format",
    ),
)

EXAMPLES = AutoOptimizationStrategy(
    id="example-driven",
    name="Example Integration",
    description="Add relevant examples to guide the model",
    focus="examples",
    prompt_modifications=(
        "Include concrete examples",
        "Show expected format",
        "Demonstrate desired style",
    ),
)

STRUCTURE = AutoOptimizationStrategy(
    id="structure-optimization",
    name="Structure Improvement",
    description="Reorganize prompt for better logical flow",
    focus="structure",
    prompt_modifications=(
        "Add clear role definition",
        "Structure with numbered steps",
        "Organize information logically",
    ),
)

CONSTRAINTS = AutoOptimizationStrategy(
    id="constraint-addition",
    name="Constraint Addition",
    description="Add explicit constraints on the output",
    focus="constraints",
    prompt_modifications=(
        "Limit response length",
        "Require a professional tone",
        "Ask for verification before answering",
    ),
)

HYBRID = AutoOptimizationStrategy(
    id="hybrid-approach",
    name="Hybrid Optimization",
    description="Combine role, task and numbered instructions",
    focus="hybrid",
    prompt_modifications=(
        "Add context and role",
        "Separate the task from the instructions",
        "Number the instructions",
    ),
)

# Priority order: the first entries are the ones tried by auto-optimization.
STRATEGY_LIBRARY: tuple[AutoOptimizationStrategy, ...] = (
    CLARITY,
    EXAMPLES,
    STRUCTURE,
    CONSTRAINTS,
    HYBRID,
)


def apply_clarity(prompt: str) -> str:
    return (
        f"{prompt}\n\nPlease be precise and specific in your response. "
        "Focus on clarity and avoid ambiguous language."
    )


def apply_examples(prompt: str) -> str:
    return (
        f"{prompt}\n\nExample format:\n"
        "- Provide concrete examples\n"
        "- Show the expected structure\n"
        "- Demonstrate the desired tone and style"
    )


def apply_structure(prompt: str) -> str:
    return (
        "You are an expert assistant. Your task is to:\n\n"
        f"1. Understand the request: {prompt}\n"
        "2. Provide a structured response\n"
        "3. Ensure completeness and accuracy\n\n"
        "Please follow this structure in your response."
    )


def apply_constraints(prompt: str) -> str:
    return (
        f"{prompt}\n\nConstraints:\n"
        "- Keep responses concise yet comprehensive\n"
        "- Use professional tone\n"
        "- Verify accuracy before responding\n"
        "- Structure information logically"
    )


def apply_hybrid(prompt: str) -> str:
    return (
        "Context: You are a helpful AI assistant focused on providing accurate, "
        "well-structured responses.\n\n"
        f"Task: {prompt}\n\n"
        "Instructions:\n"
        "1. Analyze the request carefully\n"
        "2. Provide a clear, structured response\n"
        "3. Include relevant examples if helpful\n"
        "4. Ensure accuracy and completeness"
    )


TRANSFORMS: dict[str, Callable[[str], str]] = {
    "clarity": apply_clarity,
    "examples": apply_examples,
    "structure": apply_structure,
    "constraints": apply_constraints,
    "hybrid": apply_hybrid,
}


def apply_strategy(prompt: str, strategy: AutoOptimizationStrategy) -> str:
    """
    Rewrite a prompt with the transform matching the strategy's focus.

    Args:
        prompt: Prompt to rewrite
        strategy: Strategy whose focus selects the transform

    Returns:
        Rewritten prompt
    """
    return TRANSFORMS[strategy.focus](prompt)


def get_strategy(strategy_id: str) -> AutoOptimizationStrategy:
    """Look up a library strategy by id."""
    for strategy in STRATEGY_LIBRARY:
        if strategy.id == strategy_id:
            return strategy
    raise KeyError(f"Unknown strategy: {strategy_id}")


BASIC_EXPLANATION = "Basic structural improvements applied to enhance clarity and specificity."
ROLE_PREFIX = "You are an expert assistant. "
DETAIL_SUFFIX = " Please provide a detailed and helpful response."


def basic_optimization(prompt: str) -> tuple[str, list[Change]]:
    """
    Cheap deterministic rewrite used when the primary optimizer is unavailable.

    Adds a role when the prompt has none and asks for detail when the prompt
    is short.

    Args:
        prompt: Prompt to rewrite

    Returns:
        Tuple of (rewritten prompt, changes applied)
    """
    optimized = prompt
    if "Role:" not in prompt and "You are" not in prompt:
        optimized = ROLE_PREFIX + optimized
    if len(prompt) < 100:
        optimized += DETAIL_SUFFIX

    changes = []
    if optimized != prompt:
        changes.append(
            Change(
                type="modification",
                description="Enhanced structure and clarity",
                original=prompt,
                optimized=optimized,
            )
        )
    return optimized, changes
