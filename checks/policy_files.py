"""Policy file checks: robots.txt, sitemap.xml, llms.txt and friends."""

import re

from .base_check import BaseCheck, FilePresenceCheck
from orchestrator.crawl_result import CrawlResult
from utils.scoring import AuditItem, CheckName, CheckStatus, Priority, round_score


class RobotsTxtCheck(BaseCheck):
    """
    Checks robots.txt for explicit directives aimed at key AI crawlers.

    Presence alone is worth 30; each key crawler mentioned adds its share
    of the remaining 70.
    """

    check_name = CheckName.ROBOTS_TXT
    category = Priority.CRITICAL
    description = "robots.txt with AI crawler directives"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        content = crawl.existing_files.robots_txt
        crawlers = list(self.config.key_crawlers)

        if not content:
            return self.item(
                0, CheckStatus.FAIL,
                "No robots.txt found",
                "Add /robots.txt with explicit AI crawler directives (GPTBot, ClaudeBot, PerplexityBot, etc.)",
            )

        mentioned = [c for c in crawlers if c in content]
        if not mentioned:
            return self.item(
                30, CheckStatus.PARTIAL,
                "robots.txt exists but has no AI crawler directives",
                f"Add explicit directives for AI crawlers: {', '.join(crawlers)}",
            )

        score = round_score(min(100, 30 + (len(mentioned) / len(crawlers)) * 70))
        missing = [c for c in crawlers if c not in mentioned]
        return self.item(
            score,
            CheckStatus.PASS if len(mentioned) >= 3 else CheckStatus.PARTIAL,
            f"robots.txt mentions {len(mentioned)}/{len(crawlers)} key AI crawlers: {', '.join(mentioned)}",
            f"Add directives for: {', '.join(missing)}" if missing
            else "robots.txt has comprehensive AI crawler coverage",
        )


class SitemapCheck(BaseCheck):
    check_name = CheckName.SITEMAP_XML
    category = Priority.CRITICAL
    description = "sitemap.xml with URL entries and lastmod dates"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        content = crawl.existing_files.sitemap_xml
        if not content:
            return self.item(0, CheckStatus.FAIL, "No sitemap.xml found",
                             "Add /sitemap.xml with all discoverable URLs")

        url_count = content.count('<loc>')
        has_lastmod = '<lastmod>' in content

        score = 50  # Base for existing
        if url_count > 0:
            score += 25
        if has_lastmod:
            score += 25
        score = min(100, score)

        lastmod_note = ' with lastmod dates' if has_lastmod else ' (no lastmod)'
        return self.item(
            score,
            CheckStatus.PASS if score >= 75 else CheckStatus.PARTIAL,
            f"Sitemap contains {url_count} URLs{lastmod_note}. Crawled {len(crawl.pages)} pages.",
            "Sitemap is well-configured" if has_lastmod
            else "Add <lastmod> dates to sitemap entries for freshness signals",
        )


LLMS_H1_RE = re.compile(r'^# .+', re.MULTILINE)
LLMS_BLOCKQUOTE_RE = re.compile(r'^> .+', re.MULTILINE)
LLMS_H2_RE = re.compile(r'^## .+', re.MULTILINE)
LLMS_LINK_RE = re.compile(r'\[.+\]\(.+\)')


class LlmsTxtCheck(BaseCheck):
    """Validates llms.txt against the llmstxt.org layout."""

    check_name = CheckName.LLMS_TXT
    category = Priority.CRITICAL
    description = "llms.txt following llmstxt.org"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        content = crawl.existing_files.llms_txt
        if not content:
            return self.item(
                0, CheckStatus.FAIL,
                "No llms.txt found",
                "Add /llms.txt following llmstxt.org: H1 site name, blockquote summary, "
                "H2 sections with link lists",
            )

        signals = {
            'H1': bool(LLMS_H1_RE.search(content)),
            'Blockquote': bool(LLMS_BLOCKQUOTE_RE.search(content)),
            'H2 sections': bool(LLMS_H2_RE.search(content)),
            'Links': bool(LLMS_LINK_RE.search(content)),
        }
        score = 40 + 15 * sum(signals.values())

        found = ', '.join(f"{label}: {'yes' if ok else 'no'}" for label, ok in signals.items())
        return self.item(
            score,
            CheckStatus.PASS if score >= 70 else CheckStatus.PARTIAL,
            f"llms.txt found. {found}",
            "llms.txt follows the llmstxt.org format" if score >= 100
            else "Ensure llms.txt has: # Site Name, > summary blockquote, ## Sections with [link](url) lists",
        )


class AiPolicyCheck(BaseCheck):
    check_name = CheckName.AI_POLICY
    category = Priority.HIGH
    description = "ai.txt and ai.json AI interaction policies"

    def evaluate(self, crawl: CrawlResult) -> AuditItem:
        has_txt = bool(crawl.existing_files.ai_txt)
        has_json = bool(crawl.existing_files.ai_json)

        if not has_txt and not has_json:
            return self.item(
                0, CheckStatus.FAIL,
                "No ai.txt or ai.json found",
                "Add /ai.txt and /ai.json to define AI interaction permissions, restrictions, "
                "and attribution requirements",
            )

        score = (50 if has_txt else 0) + (50 if has_json else 0)
        if not has_txt:
            recommendation = "Add /ai.txt for human-readable AI policy"
        elif not has_json:
            recommendation = "Add /ai.json for machine-parseable AI policy"
        else:
            recommendation = "Both AI policy files are present"

        return self.item(
            score,
            CheckStatus.PASS if has_txt and has_json else CheckStatus.PARTIAL,
            f"ai.txt: {'found' if has_txt else 'missing'}, ai.json: {'found' if has_json else 'missing'}",
            recommendation,
        )


class LlmsFullTxtCheck(FilePresenceCheck):
    check_name = CheckName.LLMS_FULL_TXT
    category = Priority.HIGH
    description = "llms-full.txt full content dump"
    file_attr = 'llms_full_txt'
    found_details = "Found llms-full.txt ({length} chars)"
    missing_details = "No llms-full.txt found"
    found_recommendation = "llms-full.txt is present"
    missing_recommendation = "Add /llms-full.txt with complete site content in markdown for bulk LLM ingestion"


class SecurityTxtCheck(FilePresenceCheck):
    check_name = CheckName.SECURITY_TXT
    category = Priority.MEDIUM
    description = "RFC 9116 security.txt"
    file_attr = 'security_txt'
    found_details = "security.txt found at /.well-known/security.txt"
    missing_details = "No security.txt found"
    found_recommendation = "RFC 9116 security.txt is present"
    missing_recommendation = "Add /.well-known/security.txt per RFC 9116 with security contact info"


class TdmRepCheck(FilePresenceCheck):
    check_name = CheckName.TDMREP_JSON
    category = Priority.MEDIUM
    description = "W3C TDM reservation"
    file_attr = 'tdmrep_json'
    found_details = "TDM reservation found"
    missing_details = "No TDM reservation found"
    found_recommendation = "W3C TDM reservation is present"
    missing_recommendation = "Add /.well-known/tdmrep.json to define text/data mining rights"


class ManifestCheck(FilePresenceCheck):
    check_name = CheckName.MANIFEST_JSON
    category = Priority.MEDIUM
    description = "Web app manifest"
    file_attr = 'manifest_json'
    found_details = "Web manifest found"
    missing_details = "No web manifest found"
    found_recommendation = "Web manifest is present"
    missing_recommendation = "Add manifest.json for site identity metadata"


class HumansTxtCheck(FilePresenceCheck):
    check_name = CheckName.HUMANS_TXT
    category = Priority.LOW
    description = "humans.txt credits"
    file_attr = 'humans_txt'
    found_details = "humans.txt found"
    missing_details = "No humans.txt found"
    found_recommendation = "humans.txt is present"
    missing_recommendation = "Add /humans.txt for team and technology info"
