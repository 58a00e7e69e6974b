"""Display evaluation results to console."""

from prompt_autotuner.types import EvaluationReport


def display_results(report: EvaluationReport) -> None:
    """
    Display evaluation results to console.

    Args:
        report: Evaluation report to summarize
    """
    print("\n" + "=" * 70)
    print(f"EVALUATION {report.status.upper()}")
    print("=" * 70)
    if report.error:
        print(f"\nError: {report.error}")
        return

    print(f"\nOriginal Score: {report.original_score:.2f}")
    print(f"Optimized Score: {report.optimized_score:.2f}")
    print(f"Overall Improvement: {report.overall_improvement:.1f}%")
    print(f"Total Time: {report.execution_time:.1f} seconds")

    if report.optimization is not None:
        confidence = report.optimization.confidence_explanation
        print(f"\nOptimizer: {report.optimization.optimizer}")
        if confidence is not None:
            print(f"Confidence: {confidence.percentage}% ({confidence.risk_level} risk)")

    if report.improvements:
        print("\nModel Comparison:")
        for model, improvement in report.improvements.items():
            print(f"  {model}: {improvement:+.1f}%")

    if report.benchmark_improvements:
        print("\nBenchmarks (accuracy change):")
        for benchmark, delta in report.benchmark_improvements.items():
            print(f"  {benchmark}: {delta:+.1f} pts")

    auto = report.auto_optimization
    if auto is not None:
        print(f"\nAuto-optimization: {auto.status} ({auto.trigger.reason})")
        print(f"  Strategy: {auto.strategy}")
        print(f"  Improvement: {auto.improvement:+.2f}")

    if auto is not None and auto.status == "success":
        print("\nRecommended Prompt:")
        print("-" * 70)
        print(auto.selected_candidate.prompt)
    else:
        print("\nOptimized Prompt:")
        print("-" * 70)
        print(report.optimized_prompt)
