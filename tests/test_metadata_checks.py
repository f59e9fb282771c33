"""Tests for meta description, Open Graph and AI directive checks."""

from checks.metadata import AiContentDirectivesCheck, MetaDescriptionsCheck, OpenGraphCheck
from utils.scoring import CheckStatus

FULL_DIRECTIVES = 'max-snippet:-1, max-image-preview:large'


class TestMetaDescriptions:

    def test_all_pages_described(self, make_crawl):
        item = MetaDescriptionsCheck().evaluate(make_crawl())
        assert (item.score, item.status) == (100, CheckStatus.PASS)

    def test_short_description_does_not_count(self, make_crawl, make_page):
        pages = [make_page(meta={'description': 'x' * 29}), make_page(meta={'description': 'x' * 30})]
        item = MetaDescriptionsCheck().evaluate(make_crawl(pages))
        assert item.score == 50
        assert item.status == CheckStatus.PARTIAL

    def test_no_descriptions(self, make_crawl, make_page):
        item = MetaDescriptionsCheck().evaluate(make_crawl([make_page(meta={'description': ''})]))
        assert (item.score, item.status) == (0, CheckStatus.FAIL)

    def test_no_pages(self, make_crawl):
        assert MetaDescriptionsCheck().evaluate(make_crawl([])).status == CheckStatus.NOT_APPLICABLE


class TestOpenGraph:

    def test_needs_title_and_description(self, make_crawl, make_page):
        pages = [
            make_page(meta={'og_title': 'T', 'og_description': 'D'}),
            make_page(meta={'og_title': 'T'}),
            make_page(meta={'og_description': 'D'}),
            make_page(),
        ]
        item = OpenGraphCheck().evaluate(make_crawl(pages))
        assert item.score == 25
        assert item.status == CheckStatus.FAIL
        assert item.details == "1/4 pages have OG title + description"

    def test_full_coverage(self, make_crawl, make_page):
        item = OpenGraphCheck().evaluate(make_crawl([make_page(meta={'og_title': 'T', 'og_description': 'D'})]))
        assert item.status == CheckStatus.PASS


class TestAiContentDirectives:

    def test_none(self, make_crawl):
        item = AiContentDirectivesCheck().evaluate(make_crawl())
        assert (item.score, item.status) == (0, CheckStatus.FAIL)
        assert item.details == "No max-snippet or max-image-preview directives found"

    def test_both_on_every_page(self, make_crawl, make_page):
        item = AiContentDirectivesCheck().evaluate(make_crawl([make_page(meta={'robots': FULL_DIRECTIVES})]))
        assert (item.score, item.status) == (100, CheckStatus.PASS)

    def test_half_coverage(self, make_crawl, make_page):
        pages = [make_page(meta={'robots': FULL_DIRECTIVES}), make_page()]
        item = AiContentDirectivesCheck().evaluate(make_crawl(pages))
        assert item.score == 50
        assert item.status == CheckStatus.PARTIAL

    def test_low_coverage_gets_half_floor(self, make_crawl, make_page):
        pages = [make_page(response_headers={'X-Robots-Tag': 'max-snippet:-1'})] + [make_page() for _ in range(3)]
        item = AiContentDirectivesCheck().evaluate(make_crawl(pages))
        # 50 points for max-snippet, scaled by max(0.25, 0.5)
        assert item.score == 25
        assert item.details == "max-snippet on 1 pages, max-image-preview on 0 pages"

    def test_case_insensitive(self, make_crawl, make_page):
        item = AiContentDirectivesCheck().evaluate(make_crawl([make_page(meta={'robots': 'MAX-SNIPPET:-1'})]))
        assert item.score == 50

    def test_no_pages(self, make_crawl):
        item = AiContentDirectivesCheck().evaluate(make_crawl([]))
        assert (item.score, item.status) == (0, CheckStatus.NOT_APPLICABLE)
