"""Save a markdown comparison report of an evaluation."""

from pathlib import Path

import aiofiles

from prompt_autotuner.types import EvaluationReport, ModelMetrics


def _metrics_lines(metrics: ModelMetrics) -> list[str]:
    if not metrics.usable:
        return ["- Evaluation failed (no usable samples)\n"]
    return [
        f"- Hallucination Rate: {metrics.hallucination_rate:.1%}\n",
        f"- Structure Score: {metrics.structure_score:.1%}\n",
        f"- Consistency Score: {metrics.consistency_score:.1%}\n",
        f"- Samples: {metrics.total_samples}\n",
    ]


def render_evaluation_report(report: EvaluationReport) -> str:
    """
    Render an evaluation report as markdown.

    Args:
        report: Evaluation report

    Returns:
        Markdown text
    """
    lines = []
    lines.append("# Prompt Evaluation Report\n\n")
    lines.append(f"**Status:** {report.status}\n")
    lines.append(f"**Generated:** {report.timestamp.isoformat(timespec='seconds')}\n")
    lines.append(f"**Overall Improvement:** {report.overall_improvement:.1f}%\n")
    lines.append(
        f"**Scores:** {report.original_score:.2f} → {report.optimized_score:.2f}\n\n"
    )
    if report.error:
        lines.append(f"**Error:** {report.error}\n\n")

    if report.improvements:
        best_model = max(report.improvements, key=report.improvements.get)
        worst_model = min(report.improvements, key=report.improvements.get)
        lines.append("## Summary\n\n")
        lines.append(
            f"- Best: {best_model} ({report.improvements[best_model]:.1f}% improvement)\n"
        )
        lines.append(
            f"- Worst: {worst_model} ({report.improvements[worst_model]:.1f}% improvement)\n\n"
        )

    lines.append("## Model Results\n\n")
    for original, optimized in zip(report.original_results, report.optimized_results):
        lines.append(f"### {original.model}\n\n")
        lines.append("**Original Prompt:**\n")
        lines.extend(_metrics_lines(original))
        lines.append("\n**Optimized Prompt:**\n")
        lines.extend(_metrics_lines(optimized))
        improvement = report.improvements.get(original.model)
        if improvement is not None:
            lines.append(f"\n- **Overall Improvement:** {improvement:.1f}%\n")
        lines.append("\n")

    if report.original_benchmarks:
        lines.append("## Benchmarks\n\n")
        lines.append("| Benchmark | Original | Optimized | Change |\n")
        lines.append("|---|---|---|---|\n")
        for original, optimized in zip(report.original_benchmarks, report.optimized_benchmarks):
            delta = report.benchmark_improvements.get(original.benchmark.value, 0.0)
            lines.append(
                f"| {original.benchmark.value} | {original.accuracy:.1%} "
                f"| {optimized.accuracy:.1%} | {delta:+.1f} pts |\n"
            )
        lines.append("\n")

    if report.optimization is not None:
        lines.append("## Optimization\n\n")
        lines.append(f"{report.optimization.explanation}\n\n")
        confidence = report.optimization.confidence_explanation
        if confidence is not None:
            lines.append(
                f"**Confidence:** {confidence.percentage}% ({confidence.risk_level} risk)\n\n"
            )
            for reason in confidence.reasoning:
                lines.append(f"- {reason}\n")
            lines.append("\n")

    auto = report.auto_optimization
    if auto is not None:
        lines.append("## Auto-Optimization\n\n")
        lines.append(f"- Trigger: {auto.trigger.reason}\n")
        lines.append(f"- Status: {auto.status}\n")
        lines.append(f"- Strategy: {auto.strategy}\n")
        lines.append(f"- Improvement: {auto.improvement:+.2f}\n\n")
        for candidate in auto.candidates:
            score = "unscored" if candidate.score is None else f"{candidate.score:.2f}"
            lines.append(f"- {candidate.strategy.name}: {score}\n")
        lines.append("\n### Selected Prompt\n\n```\n")
        lines.append(auto.selected_candidate.prompt)
        lines.append("\n```\n")

    return "".join(lines)


async def save_evaluation_report(report: EvaluationReport, output_dir: str) -> Path:
    """
    Save a markdown comparison report to file.

    Args:
        report: Evaluation report
        output_dir: Directory to save the report

    Returns:
        Path to saved report file
    """
    stamp = report.timestamp.strftime("%Y%m%d-%H%M%S")
    report_file = Path(output_dir) / f"evaluation-{stamp}.md"
    report_file.parent.mkdir(parents=True, exist_ok=True)

    async with aiofiles.open(report_file, "w") as f:
        await f.write(render_evaluation_report(report))

    return report_file
