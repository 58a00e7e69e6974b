"""Runner that wires the orchestrator to storage and reporting.

This module provides a reusable runner that accepts a connector and
configuration and runs the evaluate-and-optimize loop end to end.
"""

import logging
from pathlib import Path

from prompt_autotuner.config import AutotunerConfig
from prompt_autotuner.connectors import BaseConnector
from prompt_autotuner.evaluation import SemanticScorer
from prompt_autotuner.optimizer import EvaluationOrchestrator
from prompt_autotuner.reports import display_results, save_evaluation_report
from prompt_autotuner.storage import Database, SessionRecorder
from prompt_autotuner.types import EvaluationReport, ModelConfig

logger = logging.getLogger(__name__)


class AutotuneRunner:
    """Runner for executing the evaluate-and-optimize loop with reporting."""

    def __init__(
        self,
        connector: BaseConnector,
        config: AutotunerConfig | None = None,
        semantic_scorer: SemanticScorer | None = None,
        database: Database | None = None,
    ):
        """Initialize the runner.

        Args:
            connector: Completion transport
            config: Autotuner configuration (defaults if None)
            semantic_scorer: Optional semantic scoring service
            database: Session database (opened at config.storage_path if None
                and session logging is enabled)
        """
        self.config = config or AutotunerConfig()
        self.database = database
        if self.database is None and self.config.enable_session_logging:
            self.database = Database(self.config.storage_path)

        self.recorder = SessionRecorder(self.database) if self.database is not None else None
        self.orchestrator = EvaluationOrchestrator(
            connector,
            config=self.config,
            semantic_scorer=semantic_scorer,
            recorder=self.recorder,
        )
        self.last_report_path: Path | None = None

    async def run(
        self,
        prompt: str,
        model_configs: list[ModelConfig] | None = None,
        **request_fields,
    ) -> EvaluationReport:
        """Run the loop for one prompt.

        Args:
            prompt: Prompt to evaluate and optimize
            model_configs: Models to evaluate against (the evaluator model set if None)
            **request_fields: Further EvaluationRequest fields (benchmark_configs,
                evaluation_input, threshold, optimized_prompt)

        Returns:
            Evaluation report
        """
        models = model_configs or list(self.config.evaluator_models)
        report = await self.orchestrator.run(prompt, models, **request_fields)

        if self.config.verbose:
            display_results(report)

        if self.config.reports_dir:
            self.last_report_path = await save_evaluation_report(report, self.config.reports_dir)
            logger.info(f"Report saved to {self.last_report_path}")

        if self.recorder is not None:
            await self.recorder.flush()
        return report

    def close(self) -> None:
        """Release the session database."""
        if self.database is not None:
            self.database.close()
