"""Main orchestrator for running the GEO audit checks."""

import sys
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Type

logger = logging.getLogger(__name__)

sys.path.insert(0, str(Path(__file__).parent.parent))

from .crawl_result import CrawlResult
from .projection import ProjectionSimulator
from utils.scoring import AuditItem, AuditResult, CheckName, ScoringConfig, DEFAULT_SCORING_CONFIG, aggregate


class Orchestrator:
    """
    Main coordinator for a GEO audit.

    Manages:
    - Check registration in audit order
    - Evaluation of every check against one crawl result
    - Aggregation into the overall score and grade
    - The projected post-deployment audit
    """

    def __init__(
        self,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
        now: Optional[datetime] = None,
        verbose: bool = False,
        progress_callback=None
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Scoring tables shared by checks, aggregator and simulator
            now: Reference time for date-relative checks
            verbose: Enable verbose output
            progress_callback: Optional callback(phase, status, detail) for progress updates
        """
        self.config = config
        self.now = now or datetime.now(timezone.utc)
        if self.now.tzinfo is None:
            self.now = self.now.replace(tzinfo=timezone.utc)
        self.verbose = verbose
        self.progress_callback = progress_callback
        self.simulator = ProjectionSimulator(config)
        self._checks: Dict[CheckName, 'BaseCheck'] = {}

    def register_check(self, check_class: Type['BaseCheck']):
        """
        Register a check class with the orchestrator.

        Registering a check with an already registered name replaces it
        in place, keeping its position in the audit order.
        """
        check = check_class(self.config, self.now)
        self._checks[check.check_name] = check

    def register_all_checks(self):
        """Register all standard checks in audit order."""
        from checks import ALL_CHECKS

        for check_class in ALL_CHECKS:
            self.register_check(check_class)

    @property
    def check_names(self) -> List[CheckName]:
        return list(self._checks.keys())

    def _notify(self, phase: str, status: str, detail: str = ""):
        if self.progress_callback:
            self.progress_callback(phase=phase, status=status, detail=detail)

    def evaluate_checks(self, crawl: CrawlResult) -> List[AuditItem]:
        """Evaluate every registered check, in registration order."""
        if not self._checks:
            self.register_all_checks()

        items = []
        for check in self._checks.values():
            item = check.evaluate(crawl)
            logger.debug("%s: %d/%d (%s)", item.name.value, item.score, item.max_score, item.status.value)
            items.append(item)
        return items

    def run_audit(self, crawl: CrawlResult) -> AuditResult:
        """
        Execute the full audit against a crawl result.

        Returns:
            AuditResult with one item per registered check
        """
        logger.info("GEO AUDIT: %s (%d pages)", crawl.base_url, len(crawl.pages))
        self._notify("Audit", "started", f"Running {len(self._checks) or 'all'} checks")

        result = aggregate(self.evaluate_checks(crawl), self.config)

        logger.info("Overall score: %d/%d (%s)", result.overall_score, result.max_possible_score,
                    result.grade.value)
        self._notify("Audit", "completed", f"Score {result.overall_score} ({result.grade.value})")
        return result

    def run_projection(self, before: AuditResult) -> AuditResult:
        """Project the audit after deploying the generated package."""
        self._notify("Projection", "started", "Simulating package deployment")
        after = self.simulator.project(before)
        self._notify("Projection", "completed", f"Projected score {after.overall_score}")
        return after

    def get_status_summary(self, result: AuditResult) -> Dict:
        """Get a summary of how the checks came out."""
        counts: Dict[str, int] = {}
        for item in result.items:
            counts[item.status.value] = counts.get(item.status.value, 0) + 1

        return {
            'total_checks': len(result.items),
            'registered_checks': len(self._checks),
            'statuses': counts,
            'overall_score': result.overall_score,
            'grade': result.grade.value,
        }
