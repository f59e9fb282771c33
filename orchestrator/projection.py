"""Projection of the audit after the generated package is deployed."""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List

from utils.scoring import (
    AuditItem, AuditResult, CheckName, CheckStatus, ScoringConfig,
    DEFAULT_SCORING_CONFIG, PACKAGE_RECOMMENDATION, aggregate,
)

logger = logging.getLogger(__name__)

# Targets at or above this pass; lower targets only reach partial
PROJECTED_PASS_THRESHOLD = 70


@dataclass
class ItemDelta:
    """Before/after pair for one check."""
    name: CheckName
    before: AuditItem
    after: AuditItem

    @property
    def change(self) -> int:
        return self.after.score - self.before.score

    @property
    def fixed_by_package(self) -> bool:
        return self.change > 0


@dataclass
class ProjectionComparison:
    """
    Before and after audits split the way the comparison report shows them.

    - fixed: items the package raised
    - needs_attention: unchanged items still below their maximum
    - already_good: unchanged items already at their maximum
    """
    before: AuditResult
    after: AuditResult
    fixed: List[ItemDelta] = field(default_factory=list)
    needs_attention: List[ItemDelta] = field(default_factory=list)
    already_good: List[ItemDelta] = field(default_factory=list)

    @property
    def score_change(self) -> int:
        return self.after.overall_score - self.before.overall_score


class ProjectionSimulator:
    """
    Simulates deploying the generated remediation package.

    Every item named in the improvement table whose score is below the
    table's target is replaced by a projected item; all other items pass
    through unchanged. The result is re-aggregated with the same weights.
    """

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config

    @property
    def improvements(self):
        return self.config.projected_improvements

    def project_item(self, item: AuditItem) -> AuditItem:
        """Projected version of one item, or the item itself when the package does not improve it."""
        improvement = self.improvements.get(item.name)
        if improvement is None or item.score >= improvement.score:
            return item

        logger.debug("Projected %s: %d -> %d", item.name.value, item.score, improvement.score)
        return replace(
            item,
            score=improvement.score,
            status=CheckStatus.PASS if improvement.score >= PROJECTED_PASS_THRESHOLD else CheckStatus.PARTIAL,
            details=improvement.note,
            recommendation=PACKAGE_RECOMMENDATION,
        )

    def project(self, before: AuditResult) -> AuditResult:
        """
        Build the projected audit.

        Args:
            before: The audit as measured on the crawl

        Returns:
            A new AuditResult; ``before`` is never modified
        """
        after = aggregate([self.project_item(item) for item in before.items], self.config)
        logger.info("Projected score: %d -> %d (%s)", before.overall_score, after.overall_score,
                    after.grade.value)
        return after

    def compare(self, before: AuditResult, after: AuditResult) -> ProjectionComparison:
        """Pair up items by name and split them into fixed / needs attention / already good."""
        after_by_name: Dict[CheckName, AuditItem] = {item.name: item for item in after.items}
        comparison = ProjectionComparison(before=before, after=after)

        for item in before.items:
            delta = ItemDelta(name=item.name, before=item, after=after_by_name.get(item.name, item))
            if delta.fixed_by_package:
                comparison.fixed.append(delta)
            elif delta.after.score < delta.after.max_score:
                comparison.needs_attention.append(delta)
            else:
                comparison.already_good.append(delta)

        return comparison


def generate_projected_audit(before: AuditResult, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> AuditResult:
    """Project an audit with a one-off simulator."""
    return ProjectionSimulator(config).project(before)
