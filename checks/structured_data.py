"""Structured data checks: JSON-LD coverage and FAQ content."""

from typing import List

from .base_check import BaseCheck
from orchestrator.crawl_result import CrawlResult
from utils.scoring import AuditItem, CheckName, CheckStatus, Priority, round_score


class StructuredDataCheck(BaseCheck):
    """
    Scores JSON-LD coverage and entity types.

    Up to 50 points for page coverage, +20 for Organization, +15 for
    WebSite and +15 when at least three distinct types appear.
    """

    check_name = CheckName.STRUCTURED_DATA
    category = Priority.CRITICAL
    description = "Schema.org JSON-LD markup"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        pages_with_json_ld = 0
        total_items = 0
        schema_types: List[str] = []

        for page in pages:
            items = page.structured_data.json_ld_items
            if not items:
                continue
            pages_with_json_ld += 1
            total_items += len(items)
            for view in items:
                for schema_type in view.types or ['unknown']:
                    if schema_type not in schema_types:
                        schema_types.append(schema_type)

        if total_items == 0:
            return self.item(
                0, CheckStatus.FAIL,
                "No JSON-LD structured data found on any page",
                "Add JSON-LD Schema.org markup: Organization on homepage, Article on blog posts, "
                "FAQPage on FAQ sections, Product on product pages",
            )

        coverage = pages_with_json_ld / len(pages) if pages else 0
        has_organization = 'Organization' in schema_types
        has_website = 'WebSite' in schema_types

        score = min(50, round_score(coverage * 50))
        if has_organization:
            score += 20
        if has_website:
            score += 15
        if len(schema_types) >= 3:
            score += 15
        score = min(100, score)

        if not has_organization:
            recommendation = "Add Organization schema to homepage for entity disambiguation"
        elif coverage < 0.5:
            recommendation = "Increase JSON-LD coverage. Aim for structured data on every significant page"
        else:
            recommendation = "Good structured data coverage"

        return self.item(
            score,
            CheckStatus.PASS if score >= 60 else CheckStatus.PARTIAL,
            f"{pages_with_json_ld}/{len(pages)} pages have JSON-LD ({total_items} total items). "
            f"Types: {', '.join(schema_types) or 'none'}",
            recommendation,
        )


class FaqContentCheck(BaseCheck):
    check_name = CheckName.FAQ_CONTENT
    category = Priority.LOW
    description = "FAQ sections with FAQPage schema"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        total_faqs = 0
        pages_with_faq = 0
        has_faq_schema = False

        for page in crawl.pages:
            faq_count = len(page.content.faq_items)
            if faq_count > 0:
                total_faqs += faq_count
                pages_with_faq += 1
            if any(view.has_type('FAQPage') for view in page.structured_data.json_ld_items):
                has_faq_schema = True

        if total_faqs == 0:
            return self.item(
                0, CheckStatus.FAIL,
                "No FAQ content detected on any page",
                "Add FAQ sections to high-traffic pages. FAQPage schema has the highest AI citation probability.",
            )

        # Up to 60 from FAQ count, 40 bonus for FAQPage schema
        score = min(60, total_faqs * 15)
        if has_faq_schema:
            score += 40
        score = min(100, score)

        if not has_faq_schema:
            recommendation = "Add FAQPage JSON-LD schema markup alongside FAQ content for maximum AI citation rates"
        elif total_faqs < 5:
            recommendation = "Add more FAQ content to additional high-traffic pages"
        else:
            recommendation = "FAQ content with schema markup detected"

        schema_note = " with FAQPage schema" if has_faq_schema else " (no FAQPage schema)"
        return self.item(
            score,
            CheckStatus.PASS if score >= 60 else CheckStatus.PARTIAL,
            f"{total_faqs} FAQ items on {pages_with_faq} pages{schema_note}",
            recommendation,
        )
