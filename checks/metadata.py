"""Page metadata checks: meta descriptions, Open Graph and AI snippet directives."""

from .base_check import BaseCheck
from orchestrator.crawl_result import CrawlResult
from utils.scoring import AuditItem, CheckName, CheckStatus, Priority, coverage_status, round_score

MIN_DESCRIPTION_LENGTH = 30


class MetaDescriptionsCheck(BaseCheck):
    check_name = CheckName.META_DESCRIPTIONS
    category = Priority.HIGH
    description = "Meaningful meta descriptions on every page"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        if not pages:
            return self.not_applicable(recommendation="Crawl pages to assess meta descriptions")

        with_description = sum(
            1 for p in pages if len(p.meta.description or '') >= MIN_DESCRIPTION_LENGTH
        )
        coverage = with_description / len(pages)

        return self.item(
            round_score(coverage * 100),
            coverage_status(coverage),
            f"{with_description}/{len(pages)} pages have meta descriptions (>={MIN_DESCRIPTION_LENGTH} chars)",
            "Add meaningful meta descriptions to all pages. AI engines use these for summaries and citations"
            if coverage < 0.8 else "Good meta description coverage",
        )


class OpenGraphCheck(BaseCheck):
    check_name = CheckName.OPEN_GRAPH
    category = Priority.MEDIUM
    description = "og:title and og:description on every page"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        if not pages:
            return self.not_applicable(recommendation="Crawl pages to assess Open Graph tags")

        with_og = sum(1 for p in pages if p.meta.og_title and p.meta.og_description)
        coverage = with_og / len(pages)

        return self.item(
            round_score(coverage * 100),
            coverage_status(coverage),
            f"{with_og}/{len(pages)} pages have OG title + description",
            "Add og:title and og:description to all pages for rich previews in AI responses"
            if coverage < 0.8 else "Good Open Graph coverage",
        )


class AiContentDirectivesCheck(BaseCheck):
    """
    max-snippet and max-image-preview robots directives.

    Each directive seen anywhere is worth 50 points; the total is scaled
    by the better of the two page coverages, with a floor of one half
    once any directive is present.
    """

    check_name = CheckName.AI_CONTENT_DIRECTIVES
    category = Priority.MEDIUM
    description = "max-snippet / max-image-preview directives"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        if not pages:
            return self.not_applicable(recommendation="Crawl pages to assess AI content directives")

        with_max_snippet = 0
        with_max_image_preview = 0
        for page in pages:
            directives = page.robots_directives
            if 'max-snippet' in directives:
                with_max_snippet += 1
            if 'max-image-preview' in directives:
                with_max_image_preview += 1

        has_directives = with_max_snippet > 0 or with_max_image_preview > 0
        coverage = max(with_max_snippet, with_max_image_preview) / len(pages)

        score = 0
        if with_max_snippet > 0:
            score += 50
        if with_max_image_preview > 0:
            score += 50
        score = round_score(score * max(coverage, 0.5 if has_directives else 0))

        if score >= 60:
            status = CheckStatus.PASS
        elif score > 0:
            status = CheckStatus.PARTIAL
        else:
            status = CheckStatus.FAIL

        if not has_directives:
            details = "No max-snippet or max-image-preview directives found"
            recommendation = ('Add <meta name="robots" content="max-snippet:-1, max-image-preview:large"> '
                              'to allow AI engines to use full content in responses')
        else:
            details = (f"max-snippet on {with_max_snippet} pages, "
                       f"max-image-preview on {with_max_image_preview} pages")
            recommendation = ("Increase coverage of max-snippet and max-image-preview across all pages"
                              if coverage < 0.8 else "AI content directives are well-configured")

        return self.item(score, status, details, recommendation)
