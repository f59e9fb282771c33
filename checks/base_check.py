"""Base check class for all GEO audit checks."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from orchestrator.crawl_result import CrawlResult
from utils.scoring import (
    AuditItem, CheckName, CheckStatus, Priority, ScoringConfig, DEFAULT_SCORING_CONFIG,
)


class BaseCheck(ABC):
    """
    Abstract base class for all audit checks.

    Each check:
    - Reads one facet of the CrawlResult (or one policy file)
    - Never mutates the crawl result or other checks' output
    - Returns exactly one AuditItem and never raises on missing data
    """

    # Class attributes that subclasses should override
    check_name: CheckName = None
    category: Priority = Priority.MEDIUM
    description: str = "Base check"

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG, now: Optional[datetime] = None):
        """
        Initialize the check.

        Args:
            config: Scoring tables (crawler lists, freshness window, ...)
            now: Reference time for date-relative rules; defaults to current UTC time
        """
        self.config = config
        self.now = now or datetime.now(timezone.utc)
        if self.now.tzinfo is None:
            self.now = self.now.replace(tzinfo=timezone.utc)

    @abstractmethod
    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        """
        Evaluate the check against a crawl result.

        Returns:
            AuditItem with the check's score and status
        """
        pass

    def item(self, score: float, status: CheckStatus, details: str, recommendation: str) -> AuditItem:
        """Build this check's AuditItem."""
        return AuditItem(
            name=self.check_name,
            category=self.category,
            score=int(score),
            status=status,
            details=details,
            recommendation=recommendation,
        )

    def not_applicable(self, details: str = "No pages crawled",
                       recommendation: str = "Crawl pages to assess this check") -> AuditItem:
        """Item for checks that cannot be judged on an empty crawl."""
        return self.item(0, CheckStatus.NOT_APPLICABLE, details, recommendation)


class FilePresenceCheck(BaseCheck):
    """
    Scores a policy file purely on whether the crawl stage found it.

    Subclasses set ``file_attr`` (attribute on ExistingGeoFiles) and the
    found/missing texts.
    """

    file_attr: str = ""
    found_details: str = ""
    missing_details: str = ""
    found_recommendation: str = ""
    missing_recommendation: str = ""

    def get_file(self, crawl: CrawlResult) -> Optional[str]:
        return getattr(crawl.existing_files, self.file_attr, None) or None

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        content = self.get_file(crawl)
        if not content:
            return self.item(0, CheckStatus.FAIL, self.missing_details, self.missing_recommendation)
        details = self.found_details.format(length=len(content))
        return self.item(100, CheckStatus.PASS, details, self.found_recommendation)
