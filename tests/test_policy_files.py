"""Tests for the policy file checks."""

import pytest

from checks.policy_files import (
    AiPolicyCheck, HumansTxtCheck, LlmsFullTxtCheck, LlmsTxtCheck, ManifestCheck,
    RobotsTxtCheck, SecurityTxtCheck, SitemapCheck, TdmRepCheck,
)
from utils.scoring import CheckName, CheckStatus, Priority


class TestRobotsTxt:

    def test_missing(self, make_crawl):
        item = RobotsTxtCheck().evaluate(make_crawl())
        assert item.score == 0
        assert item.status == CheckStatus.FAIL
        assert item.name == CheckName.ROBOTS_TXT
        assert item.category == Priority.CRITICAL

    def test_empty_string_counts_as_missing(self, make_crawl):
        assert RobotsTxtCheck().evaluate(make_crawl(robots_txt="")).score == 0

    def test_no_ai_crawlers(self, make_crawl):
        item = RobotsTxtCheck().evaluate(make_crawl(robots_txt="User-agent: *\nAllow: /"))
        assert item.score == 30
        assert item.status == CheckStatus.PARTIAL

    def test_three_crawlers_pass(self, make_crawl):
        text = "User-agent: GPTBot\nAllow: /\nUser-agent: ClaudeBot\nAllow: /\nUser-agent: Google-Extended\nAllow: /"
        item = RobotsTxtCheck().evaluate(make_crawl(robots_txt=text))
        # 30 + 3/5 * 70
        assert item.score == 72
        assert item.status == CheckStatus.PASS
        assert "PerplexityBot" in item.recommendation

    def test_two_crawlers_partial(self, make_crawl):
        item = RobotsTxtCheck().evaluate(make_crawl(robots_txt="User-agent: GPTBot\nUser-agent: ClaudeBot\nAllow: /"))
        assert item.score == 58
        assert item.status == CheckStatus.PARTIAL

    def test_all_crawlers(self, make_crawl, full_geo_files):
        item = RobotsTxtCheck().evaluate(make_crawl(robots_txt=full_geo_files['robots_txt']))
        assert item.score == 100
        assert item.recommendation == "robots.txt has comprehensive AI crawler coverage"


class TestSitemap:

    def test_missing(self, make_crawl):
        item = SitemapCheck().evaluate(make_crawl())
        assert (item.score, item.status) == (0, CheckStatus.FAIL)

    def test_urls_without_lastmod(self, make_crawl):
        item = SitemapCheck().evaluate(make_crawl(
            sitemap_xml='<urlset><url><loc>https://example.com/</loc></url></urlset>'))
        assert item.score == 75
        assert item.status == CheckStatus.PASS
        assert "(no lastmod)" in item.details

    def test_urls_with_lastmod(self, make_crawl):
        item = SitemapCheck().evaluate(make_crawl(
            sitemap_xml='<urlset><url><loc>https://example.com/</loc><lastmod>2025-01-01</lastmod></url></urlset>'))
        assert item.score == 100

    def test_empty_urlset(self, make_crawl):
        item = SitemapCheck().evaluate(make_crawl(sitemap_xml='<urlset></urlset>'))
        assert item.score == 50
        assert item.status == CheckStatus.PARTIAL


class TestLlmsTxt:

    def test_missing(self, make_crawl):
        assert LlmsTxtCheck().evaluate(make_crawl()).score == 0

    def test_complete(self, make_crawl):
        item = LlmsTxtCheck().evaluate(make_crawl(llms_txt="# Site\n> Summary\n## Docs\n- [Page](url)"))
        assert item.score == 100
        assert item.status == CheckStatus.PASS

    def test_h1_only(self, make_crawl):
        item = LlmsTxtCheck().evaluate(make_crawl(llms_txt="# My Site\nSome content without blockquote or sections"))
        assert item.score == 55
        assert item.status == CheckStatus.PARTIAL

    def test_plain_text(self, make_crawl):
        item = LlmsTxtCheck().evaluate(make_crawl(llms_txt="just words"))
        assert item.score == 40

    def test_h2_is_not_h1(self, make_crawl):
        item = LlmsTxtCheck().evaluate(make_crawl(llms_txt="## Only a section"))
        assert item.score == 55
        assert "H1: no" in item.details


class TestAiPolicy:

    @pytest.mark.parametrize("files,score,status", [
        ({}, 0, CheckStatus.FAIL),
        ({'ai_txt': 'policy'}, 50, CheckStatus.PARTIAL),
        ({'ai_json': '{}'}, 50, CheckStatus.PARTIAL),
        ({'ai_txt': 'policy', 'ai_json': '{}'}, 100, CheckStatus.PASS),
    ])
    def test_combinations(self, make_crawl, files, score, status):
        item = AiPolicyCheck().evaluate(make_crawl(**files))
        assert (item.score, item.status) == (score, status)


class TestPresenceChecks:

    @pytest.mark.parametrize("check_class,attr,tier", [
        (LlmsFullTxtCheck, 'llms_full_txt', Priority.HIGH),
        (SecurityTxtCheck, 'security_txt', Priority.MEDIUM),
        (TdmRepCheck, 'tdmrep_json', Priority.MEDIUM),
        (ManifestCheck, 'manifest_json', Priority.MEDIUM),
        (HumansTxtCheck, 'humans_txt', Priority.LOW),
    ])
    def test_present_and_missing(self, make_crawl, check_class, attr, tier):
        missing = check_class().evaluate(make_crawl())
        present = check_class().evaluate(make_crawl(**{attr: 'content'}))
        assert (missing.score, missing.status) == (0, CheckStatus.FAIL)
        assert (present.score, present.status) == (100, CheckStatus.PASS)
        assert present.category == tier

    def test_llms_full_reports_length(self, make_crawl):
        item = LlmsFullTxtCheck().evaluate(make_crawl(llms_full_txt='x' * 42))
        assert item.details == "Found llms-full.txt (42 chars)"
