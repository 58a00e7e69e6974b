"""Command-line entry point for the prompt autotuner.

Run the evaluate-and-optimize loop with:
    python -m prompt_autotuner "Summarize this." --model gpt-4o-mini

Requirements:
    - OpenAI API key set in .env file or OPENAI_API_KEY environment variable
"""

import argparse
import asyncio
import logging
import sys

from prompt_autotuner.config import load_config, setup_logging
from prompt_autotuner.connectors import OpenAIConnector
from prompt_autotuner.errors import RequestValidationError
from prompt_autotuner.evaluation import EmbeddingSemanticScorer
from prompt_autotuner.runner import AutotuneRunner
from prompt_autotuner.types import BenchmarkConfig, BenchmarkName, ModelConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt_autotuner",
        description="Evaluate a prompt against LLMs and optimize it when it scores low.",
    )
    parser.add_argument("prompt", help="Prompt to evaluate")
    parser.add_argument(
        "--model",
        action="append",
        dest="models",
        help="Model to evaluate against (repeatable; defaults to the evaluator model set)",
    )
    parser.add_argument(
        "--benchmark",
        action="append",
        dest="benchmarks",
        choices=[name.value for name in BenchmarkName],
        help="Benchmark to run (repeatable)",
    )
    parser.add_argument("--sample-size", type=int, default=5, help="Benchmark questions each")
    parser.add_argument("--optimized", help="Use this rewrite instead of calling the optimizer")
    parser.add_argument("--input", dest="evaluation_input", help="Concrete input for the prompt")
    parser.add_argument("--threshold", type=float, help="Score threshold (0-100)")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--report-dir", help="Directory for the markdown report")
    parser.add_argument(
        "--semantic", action="store_true", help="Blend in embedding-based semantic scoring"
    )
    return parser


async def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    updates = {"verbose": True}
    if args.report_dir:
        updates["reports_dir"] = args.report_dir
    config = config.model_copy(update=updates)

    if not config.openai_api_key:
        print("ERROR: OPENAI_API_KEY not found!")
        print("Add it to a .env file or export it in your shell.")
        return 1

    connector = OpenAIConnector(api_key=config.openai_api_key)
    semantic_scorer = (
        EmbeddingSemanticScorer(api_key=config.openai_api_key, model=config.embedding_model)
        if args.semantic
        else None
    )
    runner = AutotuneRunner(connector, config=config, semantic_scorer=semantic_scorer)

    models = [ModelConfig(name=name) for name in args.models] if args.models else None
    benchmarks = [
        BenchmarkConfig(name=BenchmarkName(name), sample_size=args.sample_size)
        for name in args.benchmarks or []
    ]
    try:
        report = await runner.run(
            args.prompt,
            models,
            benchmark_configs=benchmarks,
            evaluation_input=args.evaluation_input,
            threshold=args.threshold,
            optimized_prompt=args.optimized,
        )
    except RequestValidationError as e:
        print(f"ERROR: {e}")
        return 2
    finally:
        runner.close()

    return 0 if report.status != "failed" else 1


def main() -> None:
    """Main entry point."""
    setup_logging()
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
