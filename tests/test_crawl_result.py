"""Tests for loading crawl result documents."""

import json

import pytest

from orchestrator.crawl_result import CrawlResult, JsonLdView, load_crawl_result
from utils.errors import CrawlResultError

CRAWL_DOC = {
    'baseUrl': 'https://example.com',
    'domain': 'example.com',
    'pages': [
        {
            'url': 'https://example.com/',
            'statusCode': 200,
            'meta': {'title': 'Home', 'description': 'Welcome', 'ogTitle': 'Home', 'canonical': ''},
            'content': {
                'headings': [{'level': 1, 'text': 'Home'}, {'level': 2, 'text': 'About'}],
                'wordCount': 320,
                'faqItems': [{'question': 'Why?', 'answer': 'Because.'}],
            },
            'existingStructuredData': {'jsonLd': [{'@type': 'Organization'}]},
            'responseHeaders': {'X-Robots-Tag': 'noindex'},
            'lastModified': 'Sun, 01 Jun 2025 10:00:00 GMT',
        },
    ],
    'siteIdentity': {'name': 'Example'},
    'existingGeoFiles': {'robotsTxt': 'User-agent: *\nAllow: /', 'llmsTxt': ''},
    'crawlStats': {'totalPages': 1, 'totalTime': 1234, 'errors': 0},
}


def test_camel_case_document():
    crawl = CrawlResult.from_dict(CRAWL_DOC)
    page = crawl.pages[0]
    assert crawl.base_url == 'https://example.com'
    assert crawl.site_name == 'Example'
    assert page.meta.og_title == 'Home'
    assert page.meta.canonical is None
    assert [h.level for h in page.content.headings] == [1, 2]
    assert page.content.word_count == 320
    assert page.content.faq_items[0].question == 'Why?'
    assert page.header('X-Robots-Tag') == 'noindex'
    assert 'noindex' in page.robots_directives
    assert crawl.existing_files.robots_txt.startswith('User-agent')
    assert crawl.existing_files.llms_txt is None
    assert crawl.crawl_stats.total_time == 1234.0


def test_snake_case_document():
    crawl = CrawlResult.from_dict({
        'base_url': 'https://example.org',
        'pages': [{'url': 'https://example.org/', 'meta': {'og_description': 'D'},
                   'content': {'word_count': '75'}}],
        'existing_files': {'humans_txt': 'Team'},
    })
    assert crawl.base_url == 'https://example.org'
    assert crawl.pages[0].meta.og_description == 'D'
    assert crawl.pages[0].content.word_count == 75
    assert crawl.existing_files.humans_txt == 'Team'


def test_site_name_falls_back_to_domain():
    crawl = CrawlResult.from_dict({'baseUrl': 'https://example.com', 'domain': 'example.com', 'pages': []})
    assert crawl.site_name == 'example.com'


@pytest.mark.parametrize("document", [[], 'text', {'baseUrl': 'https://example.com'}, {'pages': {}}])
def test_malformed_documents_raise(document):
    with pytest.raises(CrawlResultError):
        CrawlResult.from_dict(document)


def test_non_object_pages_are_skipped():
    crawl = CrawlResult.from_dict({'baseUrl': 'https://example.com', 'pages': ['bad', {'url': 'https://example.com/'}]})
    assert [p.url for p in crawl.pages] == ['https://example.com/']


def test_garbage_fields_degrade():
    crawl = CrawlResult.from_dict({
        'baseUrl': 'https://example.com',
        'pages': [{'url': 'u', 'meta': 'nope', 'content': {'headings': ['x'], 'wordCount': 'many'},
                   'responseHeaders': []}],
        'crawlStats': {'totalTime': 'slow'},
    })
    page = crawl.pages[0]
    assert page.meta.title == ''
    assert page.content.headings == []
    assert page.content.word_count == 0
    assert page.response_headers == {}
    assert crawl.crawl_stats.total_time == 0.0


def test_json_ld_view_tolerates_garbage():
    assert JsonLdView('text').types == []
    assert JsonLdView({'@type': ''}).primary_type == 'unknown'
    assert JsonLdView({'@type': ['A', 3, 'B']}).types == ['A', 'B']
    assert JsonLdView({'datePublished': '2025-01-01'}).has_date


def test_to_dict_uses_camel_case():
    data = CrawlResult.from_dict(CRAWL_DOC).to_dict()
    assert set(data) == {'baseUrl', 'domain', 'pages', 'siteIdentity', 'existingGeoFiles', 'crawlStats'}
    assert data['existingGeoFiles']['robotsTxt'].startswith('User-agent')
    assert data['pages'][0]['content']['wordCount'] == 320


def test_load_from_file(tmp_path):
    path = tmp_path / 'crawl.json'
    path.write_text(json.dumps(CRAWL_DOC), encoding='utf-8')
    crawl = load_crawl_result(path)
    assert len(crawl.pages) == 1


def test_load_missing_file(tmp_path):
    with pytest.raises(CrawlResultError, match='not found'):
        load_crawl_result(tmp_path / 'missing.json')


def test_load_invalid_json(tmp_path):
    path = tmp_path / 'crawl.json'
    path.write_text('{not json', encoding='utf-8')
    with pytest.raises(CrawlResultError):
        load_crawl_result(path)


def test_infinite_numbers_degrade(tmp_path):
    path = tmp_path / 'crawl.json'
    path.write_text('{"baseUrl": "https://example.com", "pages": [{"url": "u", "statusCode": Infinity, '
                    '"content": {"wordCount": Infinity}}], "crawlStats": {"totalPages": -Infinity}}',
                    encoding='utf-8')
    crawl = load_crawl_result(path)
    assert crawl.pages[0].content.word_count == 0
    assert crawl.pages[0].status_code == 200
    assert crawl.crawl_stats.total_pages == 0
