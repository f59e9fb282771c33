"""Content checks: rendering, headings, freshness and depth."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser

from .base_check import BaseCheck
from orchestrator.crawl_result import CrawlResult, PageData
from utils.scoring import AuditItem, CheckName, CheckStatus, Priority, coverage_status, round_score

logger = logging.getLogger(__name__)

SSR_MIN_WORDS = 50
THIN_PAGE_WORDS = 300
SUBSTANTIVE_PAGE_WORDS = 500
WELL_STRUCTURED_HEADINGS = 3


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO or HTTP date; naive values are taken as UTC. None when unparseable."""
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        # Out-of-range offsets only fail once the offset is used
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, TypeError):
        logger.debug("Unparseable date signal: %r", value)
        return None


class ServerRenderingCheck(BaseCheck):
    """Pages whose content is present without executing JavaScript."""

    check_name = CheckName.SERVER_RENDERING
    category = Priority.CRITICAL
    description = "Content renders without JavaScript"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        if not pages:
            return self.not_applicable(recommendation="Crawl pages to assess server-side rendering")

        ssr_pages = sum(1 for p in pages if p.content.word_count > SSR_MIN_WORDS)
        coverage = ssr_pages / len(pages)

        return self.item(
            round_score(coverage * 100),
            coverage_status(coverage),
            f"{ssr_pages}/{len(pages)} pages have server-rendered content (>{SSR_MIN_WORDS} words without JS)",
            "AI crawlers cannot execute JavaScript. Ensure content is in the initial HTML response via SSR/SSG"
            if coverage < 0.8 else "Content renders without JavaScript",
        )


def has_correct_hierarchy(page: PageData) -> bool:
    """Exactly one H1 and no heading deeper than one level below its predecessor."""
    headings = page.content.headings
    if sum(1 for h in headings if h.level == 1) != 1:
        return False
    for previous, current in zip(headings, headings[1:]):
        if current.level > previous.level + 1:
            return False
    return True


class HeadingHierarchyCheck(BaseCheck):
    check_name = CheckName.HEADING_HIERARCHY
    category = Priority.HIGH
    description = "Single H1 and no skipped heading levels"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        if not crawl.pages:
            return self.not_applicable(recommendation="Crawl pages to assess heading hierarchy")

        headed = [p for p in crawl.pages if p.content.headings]
        correct = sum(1 for p in headed if has_correct_hierarchy(p))
        coverage = correct / len(headed) if headed else 0

        return self.item(
            round_score(coverage * 100),
            coverage_status(coverage),
            f"{correct}/{len(headed)} pages with headings have correct H1>H2>H3 hierarchy",
            "Fix heading hierarchy: single H1, no skipped levels (H1>H2>H3). LLMs use headings to "
            "understand content structure." if coverage < 0.8 else "Heading hierarchy is clean",
        )


class ContentFreshnessCheck(BaseCheck):
    """
    Date signals and recency.

    Score = 50 x share of pages with any date signal
          + 30 x share of dated pages updated within the freshness window
          + 20 x share of pages with a JSON-LD date field
    """

    check_name = CheckName.CONTENT_FRESHNESS
    category = Priority.HIGH
    description = "Date signals and recent updates"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        if not pages:
            return self.not_applicable(recommendation="Crawl pages to assess content freshness")

        window = timedelta(days=self.config.freshness_window_days)
        pages_with_date = 0
        pages_recent = 0
        pages_with_json_ld_date = 0

        for page in pages:
            date_str = page.meta.modified_date or page.meta.published_date or page.last_modified
            if date_str:
                pages_with_date += 1
                parsed = parse_date(date_str)
                if parsed is not None and (self.now - parsed) < window:
                    pages_recent += 1

            if any(view.has_date for view in page.structured_data.json_ld_items):
                pages_with_json_ld_date += 1

        date_coverage = pages_with_date / len(pages)
        recency_ratio = pages_recent / pages_with_date if pages_with_date else 0
        json_ld_date_ratio = pages_with_json_ld_date / len(pages)

        score = min(100, round_score(date_coverage * 50 + recency_ratio * 30 + json_ld_date_ratio * 20))

        if score >= 60:
            status = CheckStatus.PASS
        elif score > 0:
            status = CheckStatus.PARTIAL
        else:
            status = CheckStatus.FAIL

        return self.item(
            score, status,
            f"{pages_with_date}/{len(pages)} pages have date signals, {pages_recent} updated within "
            f"{self.config.freshness_window_days} days, {pages_with_json_ld_date} with JSON-LD dates",
            "Add dateModified to JSON-LD and keep content updated. AI-cited content skews fresher "
            "than traditional results" if score < 60 else "Content freshness signals are strong",
        )


class ContentDepthCheck(BaseCheck):
    """
    Word count and heading density.

    Score = 30 x (1 - thin share) + 40 x substantive share
          + 30 x well-structured share among substantive pages
    """

    check_name = CheckName.CONTENT_DEPTH
    category = Priority.HIGH
    description = "Substantive, well-structured content"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        if not pages:
            return self.not_applicable(recommendation="Crawl pages to assess content depth")

        thin_pages = 0
        substantive_pages = 0
        well_structured = 0

        for page in pages:
            words = page.content.word_count
            if words < THIN_PAGE_WORDS:
                thin_pages += 1
            if words > SUBSTANTIVE_PAGE_WORDS:
                substantive_pages += 1
                if len(page.content.headings) >= WELL_STRUCTURED_HEADINGS:
                    well_structured += 1

        thin_ratio = thin_pages / len(pages)
        depth_ratio = substantive_pages / len(pages)
        structure_ratio = well_structured / substantive_pages if substantive_pages else 0

        score = min(100, round_score((1 - thin_ratio) * 30 + depth_ratio * 40 + structure_ratio * 30))

        if score >= 60:
            status = CheckStatus.PASS
        elif score > 0:
            status = CheckStatus.PARTIAL
        else:
            status = CheckStatus.FAIL

        return self.item(
            score, status,
            f"{substantive_pages}/{len(pages)} pages >{SUBSTANTIVE_PAGE_WORDS} words, {well_structured} "
            f"well-structured (>={WELL_STRUCTURED_HEADINGS} headings), {thin_pages} thin pages "
            f"(<{THIN_PAGE_WORDS} words)",
            "Add more substantive content (>500 words) with clear heading structure (>=3 headings). "
            "AI engines chunk content by paragraphs under headings." if score < 60
            else "Content depth and structure are solid",
        )
