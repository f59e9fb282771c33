"""Crawler access checks: AI bot blocking and search engine indexing."""

import re
from typing import List

from .base_check import BaseCheck
from orchestrator.crawl_result import CrawlResult
from utils.robots import RobotsDirectiveAnalyzer
from utils.scoring import AuditItem, CheckName, CheckStatus, Priority, round_score

SITEMAP_DIRECTIVE_RE = re.compile(r'^Sitemap:', re.IGNORECASE | re.MULTILINE)


class AiBotBlockingCheck(BaseCheck):
    """
    Detects robots.txt rules that fully block AI crawlers.

    Uses RobotsDirectiveAnalyzer, so a wildcard ``Disallow: /`` counts
    against every crawler without its own ``Allow: /`` group.
    """

    check_name = CheckName.AI_BOT_BLOCKING
    category = Priority.CRITICAL
    description = "AI crawlers not accidentally blocked"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        content = crawl.existing_files.robots_txt
        if not content:
            return self.item(
                100, CheckStatus.PASS,
                "No robots.txt found. AI bots are not blocked (but consider adding one with "
                "explicit Allow directives)",
                'Add /robots.txt with explicit "Allow: /" for AI crawlers to signal openness',
            )

        crawlers = list(self.config.blocking_crawlers)
        blocked = RobotsDirectiveAnalyzer(crawlers).blocked_crawlers(content)

        if not blocked:
            return self.item(
                100, CheckStatus.PASS,
                "No AI crawlers are blocked in robots.txt",
                "robots.txt does not block AI crawlers",
            )

        blocked_pct = len(blocked) / len(crawlers)
        score = round_score(max(0, (1 - blocked_pct) * 100))
        return self.item(
            score,
            CheckStatus.FAIL if blocked_pct > 0.5 else CheckStatus.PARTIAL,
            f"{len(blocked)}/{len(crawlers)} AI crawlers are blocked: {', '.join(blocked)}",
            f'Remove "Disallow: /" for these AI crawlers to allow indexing: {", ".join(blocked)}',
        )


class SearchIndexingCheck(BaseCheck):
    """
    Five 20-point signals that a site is set up for search engine discovery.

    Signals:
    - Google Search Console verification meta tag
    - Bing verification (meta tag or BingSiteAuth.xml)
    - Sitemap directive in robots.txt
    - No page carrying noindex (meta robots or X-Robots-Tag)
    - Canonical URLs on at least 80% of pages (linear partial credit below)
    """

    check_name = CheckName.SEARCH_INDEXING
    category = Priority.CRITICAL
    description = "Search engine verification and indexability"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        pages = crawl.pages
        files = crawl.existing_files
        score = 0
        signals: List[str] = []
        missing: List[str] = []

        if any(p.meta.google_verification for p in pages):
            score += 20
            signals.append("Google Search Console verification")
        else:
            missing.append("Google Search Console verification tag")

        has_bing_meta = any(p.meta.bing_verification for p in pages)
        has_bing_file = bool(files.bing_site_auth)
        if has_bing_meta or has_bing_file:
            score += 20
            if has_bing_meta and has_bing_file:
                method = "meta tag + BingSiteAuth.xml"
            elif has_bing_meta:
                method = "meta tag"
            else:
                method = "BingSiteAuth.xml"
            signals.append(f"Bing Webmaster Tools verification ({method})")
        else:
            missing.append("Bing Webmaster Tools verification (meta tag or BingSiteAuth.xml)")

        if SITEMAP_DIRECTIVE_RE.search(files.robots_txt or ''):
            score += 20
            signals.append("Sitemap in robots.txt")
        else:
            missing.append("Sitemap directive in robots.txt")

        noindex_pages = [p for p in pages if 'noindex' in p.robots_directives]
        if not noindex_pages:
            score += 20
            signals.append("No noindex pages")
        else:
            missing.append(f"{len(noindex_pages)} page(s) with noindex")

        with_canonical = sum(1 for p in pages if p.meta.canonical)
        canonical_coverage = with_canonical / len(pages) if pages else 0
        if canonical_coverage >= 0.8:
            score += 20
            signals.append(f"Canonical URLs set ({with_canonical}/{len(pages)} pages)")
        elif canonical_coverage > 0:
            score += round_score(20 * canonical_coverage)
            missing.append(f"Canonical URLs on only {with_canonical}/{len(pages)} pages")
        else:
            missing.append("No canonical URLs set")

        score = min(100, score)

        if signals:
            details = f"Indexing signals found: {', '.join(signals)}"
            if missing:
                details += f". Missing: {', '.join(missing)}"
        else:
            details = f"No indexing signals found. Missing: {', '.join(missing)}"

        if score == 100:
            status = CheckStatus.PASS
            recommendation = ("All search engine indexing signals are present. The site is "
                              "well-configured for discovery")
        elif score >= 50:
            status = CheckStatus.PARTIAL
            recommendation = f"Partial indexing setup. Add missing signals: {', '.join(missing)}"
        else:
            status = CheckStatus.FAIL
            recommendation = ("The site is likely not indexed by search engines. Set up Google Search "
                              "Console and Bing Webmaster Tools, add a Sitemap directive to robots.txt, "
                              "set canonical URLs, and remove any noindex tags")

        return self.item(score, status, details, recommendation)
