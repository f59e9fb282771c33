"""Shared factories for GEO audit tests."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from checks import ALL_CHECKS
from orchestrator.crawl_result import (
    CrawlResult, CrawlStats, ExistingGeoFiles, ExistingStructuredData, FAQItem,
    HeadingNode, PageContent, PageData, PageMeta, SiteIdentity,
)
from utils.scoring import AuditItem, CheckStatus, aggregate

NOW = datetime(2025, 6, 15, tzinfo=timezone.utc)

CHECK_TIERS = {check.check_name: check.category for check in ALL_CHECKS}


def build_page(url='https://example.com/', meta=None, headings=(1,), word_count=120,
               faq_items=0, json_ld=None, last_modified=None, response_headers=None):
    """
    A page that renders server-side with one H1 and a long enough description.

    ``headings`` is a sequence of levels; ``faq_items`` a count of generated pairs.
    """
    page_meta = {
        'title': 'Test Page',
        'description': 'A test page description that is long enough',
        'language': 'en',
    }
    page_meta.update(meta or {})
    content = PageContent(
        headings=[HeadingNode(level=level, text=f"Heading {i}") for i, level in enumerate(headings)],
        body_text='Test body text ' * 40,
        word_count=word_count,
        faq_items=[FAQItem(question=f"Question {i}?", answer=f"Answer {i}.") for i in range(faq_items)],
    )
    return PageData(
        url=url,
        meta=PageMeta(**page_meta),
        content=content,
        structured_data=ExistingStructuredData(json_ld=list(json_ld or [])),
        last_modified=last_modified,
        response_headers={k.lower(): v for k, v in (response_headers or {}).items()},
    )


def build_crawl(pages=None, **files):
    """A crawl of example.com; keyword arguments set ExistingGeoFiles attributes."""
    if pages is None:
        pages = [build_page()]
    return CrawlResult(
        base_url='https://example.com',
        domain='example.com',
        pages=list(pages),
        site_identity=SiteIdentity(name='Test Site'),
        existing_files=ExistingGeoFiles(**files),
        crawl_stats=CrawlStats(total_pages=len(pages), total_time=1000, errors=0),
    )


def build_item(name, score=0, status=CheckStatus.FAIL, category=None):
    return AuditItem(
        name=name,
        category=category or CHECK_TIERS[name],
        score=score,
        status=status,
        details='Test details',
        recommendation='Test recommendation',
    )


def build_audit(items=None):
    """Aggregated audit; defaults to every check failing with score 0."""
    if items is None:
        items = [build_item(check.check_name) for check in ALL_CHECKS]
    return aggregate(items)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def make_crawl():
    return build_crawl


@pytest.fixture
def make_item():
    return build_item


@pytest.fixture
def make_audit():
    return build_audit


@pytest.fixture
def full_geo_files():
    """Every well-known GEO file present and well-formed."""
    return {
        'robots_txt': ('User-agent: GPTBot\nAllow: /\nUser-agent: ClaudeBot\nAllow: /\n'
                       'User-agent: Google-Extended\nAllow: /\nUser-agent: PerplexityBot\nAllow: /\n'
                       'User-agent: Applebot-Extended\nAllow: /\n\nSitemap: https://example.com/sitemap.xml'),
        'sitemap_xml': '<urlset><url><loc>https://example.com/</loc><lastmod>2025-01-01</lastmod></url></urlset>',
        'llms_txt': '# Site\n> Summary\n## Docs\n- [Page](https://example.com)',
        'llms_full_txt': 'Full content',
        'ai_txt': 'AI policy text',
        'ai_json': '{"policy":"allow"}',
        'security_txt': 'Contact: sec@example.com',
        'tdmrep_json': '{"policy":[]}',
        'humans_txt': 'Team info',
        'manifest_json': '{"name":"Site"}',
    }
