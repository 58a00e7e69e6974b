"""Reports package for presenting evaluation results."""

from prompt_autotuner.reports.display_results import display_results
from prompt_autotuner.reports.save_evaluation_report import (
    render_evaluation_report,
    save_evaluation_report,
)

__all__ = [
    "display_results",
    "render_evaluation_report",
    "save_evaluation_report",
]
