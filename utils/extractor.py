"""Build PageData from an HTML document with BeautifulSoup.

Offline helper for producing crawl results from saved pages. It does not
fetch anything; callers pass in the HTML and response headers, or point
``load_site_directory`` at a directory of saved files (CLI ``--site-dir``).
"""

import re
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from orchestrator.crawl_result import (
    GEO_FILES, CrawlResult, CrawlStats, ExistingGeoFiles, ExistingStructuredData, FAQItem,
    HeadingNode, PageContent, PageData, PageMeta, SiteIdentity,
)
from utils.errors import CrawlResultError

logger = logging.getLogger(__name__)

NON_CONTENT_TAGS = ['script', 'style', 'nav', 'footer', 'header', 'aside', 'iframe', 'noscript', 'svg']
HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']
WHITESPACE_RE = re.compile(r'\s+')


def _clean(text: str) -> str:
    return WHITESPACE_RE.sub(' ', text or '').strip()


def _get_meta(soup: BeautifulSoup, name: str) -> Optional[str]:
    """Content of <meta name=...> or <meta property=...>, None when missing or empty."""
    tag = soup.find('meta', attrs={'name': name}) or soup.find('meta', attrs={'property': name})
    if tag and tag.get('content'):
        return tag['content'].strip() or None
    return None


def extract_meta(soup: BeautifulSoup) -> PageMeta:
    title_tag = soup.find('title')
    h1 = soup.find('h1')
    title = (title_tag.get_text(strip=True) if title_tag else '') or _get_meta(soup, 'og:title') \
        or (h1.get_text(strip=True) if h1 else '')

    canonical_tag = soup.find('link', rel='canonical')
    html_tag = soup.find('html')
    time_tag = soup.find('time', attrs={'datetime': True})

    keywords = [k.strip() for k in (_get_meta(soup, 'keywords') or '').split(',') if k.strip()]

    return PageMeta(
        title=title or '',
        description=_get_meta(soup, 'description') or _get_meta(soup, 'og:description') or '',
        canonical=canonical_tag.get('href') if canonical_tag else None,
        language=(html_tag.get('lang') if html_tag else None) or _get_meta(soup, 'language'),
        og_title=_get_meta(soup, 'og:title'),
        og_description=_get_meta(soup, 'og:description'),
        og_image=_get_meta(soup, 'og:image'),
        og_type=_get_meta(soup, 'og:type'),
        og_site_name=_get_meta(soup, 'og:site_name'),
        twitter_card=_get_meta(soup, 'twitter:card'),
        twitter_title=_get_meta(soup, 'twitter:title'),
        twitter_description=_get_meta(soup, 'twitter:description'),
        twitter_image=_get_meta(soup, 'twitter:image'),
        author=_get_meta(soup, 'author'),
        published_date=_get_meta(soup, 'article:published_time') or _get_meta(soup, 'datePublished')
        or _get_meta(soup, 'date') or (time_tag['datetime'] if time_tag else None),
        modified_date=_get_meta(soup, 'article:modified_time') or _get_meta(soup, 'dateModified'),
        keywords=keywords,
        robots=_get_meta(soup, 'robots'),
        google_verification=_get_meta(soup, 'google-site-verification'),
        bing_verification=_get_meta(soup, 'msvalidate.01'),
        yandex_verification=_get_meta(soup, 'yandex-verification'),
    )


def extract_headings(soup: BeautifulSoup) -> List[HeadingNode]:
    """Headings in document order, skipping empty ones."""
    headings = []
    for tag in soup.find_all(HEADING_TAGS):
        text = tag.get_text(strip=True)
        if text:
            headings.append(HeadingNode(level=int(tag.name[1]), text=text))
    return headings


def extract_json_ld(soup: BeautifulSoup) -> List[Dict]:
    """JSON-LD objects from every ld+json script, with @graph flattened."""
    results = []
    for script in soup.find_all('script', type='application/ld+json'):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.debug("Skipping malformed JSON-LD block")
            continue

        if isinstance(parsed, list):
            results.extend(item for item in parsed if isinstance(item, dict))
        elif isinstance(parsed, dict):
            graph = parsed.get('@graph')
            if isinstance(graph, list):
                results.extend(item for item in graph if isinstance(item, dict))
            else:
                results.append(parsed)
    return results


def _json_ld_faq_items(json_ld: List[Dict]) -> List[FAQItem]:
    items = []
    for block in json_ld:
        types = block.get('@type')
        types = types if isinstance(types, list) else [types]
        if 'FAQPage' not in types:
            continue
        entities = block.get('mainEntity') or []
        if isinstance(entities, dict):
            entities = [entities]
        for entity in entities:
            if not isinstance(entity, dict):
                continue
            answer = entity.get('acceptedAnswer') or {}
            answer_text = answer.get('text', '') if isinstance(answer, dict) else str(answer)
            question = _clean(str(entity.get('name', '')))
            if question and answer_text:
                items.append(FAQItem(question=question, answer=_clean(str(answer_text))))
    return items


def extract_faq_items(soup: BeautifulSoup, json_ld: List[Dict]) -> List[FAQItem]:
    """
    FAQ pairs from microdata, <details>/<summary>, question headings,
    definition lists and FAQPage JSON-LD, de-duplicated by question.
    """
    items: List[FAQItem] = []

    for question_el in soup.select('[itemtype*="FAQPage"] [itemtype*="Question"]'):
        name = question_el.select_one('[itemprop="name"]')
        answer = question_el.select_one('[itemprop="acceptedAnswer"], [itemprop="text"]')
        if name and answer:
            items.append(FAQItem(_clean(name.get_text()), _clean(answer.get_text())))

    for details in soup.find_all('details'):
        summary = details.find('summary')
        if not summary:
            continue
        question = _clean(summary.get_text())
        answer = _clean(' '.join(
            child.get_text() if hasattr(child, 'get_text') else str(child)
            for child in details.children if child is not summary
        ))
        items.append(FAQItem(question, answer))

    for heading in soup.find_all(['h2', 'h3', 'h4']):
        question = _clean(heading.get_text())
        if not question.endswith('?'):
            continue
        sibling = heading.find_next_sibling()
        if sibling is not None and sibling.name in ('p', 'div'):
            answer = _clean(sibling.get_text())
            if len(answer) > 20:
                items.append(FAQItem(question, answer))

    for dt in soup.select('dl dt'):
        dd = dt.find_next_sibling()
        if dd is not None and dd.name == 'dd':
            items.append(FAQItem(_clean(dt.get_text()), _clean(dd.get_text())))

    items.extend(_json_ld_faq_items(json_ld))

    seen = set()
    unique = []
    for item in items:
        if not item.question or not item.answer or item.question in seen:
            continue
        seen.add(item.question)
        unique.append(item)
    return unique


def extract_body_text(soup: BeautifulSoup) -> str:
    """Visible text, preferring the main content area. Mutates the soup."""
    for tag in soup.find_all(NON_CONTENT_TAGS):
        tag.decompose()

    main = soup.select('main, article, [role="main"]')
    text = _clean(' '.join(el.get_text(separator=' ') for el in main))
    if len(text) < 50:
        root = soup.body or soup
        text = _clean(root.get_text(separator=' '))
    return text


def extract_lists(soup: BeautifulSoup) -> List[List[str]]:
    lists = []
    for list_el in soup.select('main ul, main ol, article ul, article ol, [role="main"] ul, [role="main"] ol'):
        entries = [_clean(li.get_text()) for li in list_el.find_all('li', recursive=False)]
        entries = [e for e in entries if e]
        if entries:
            lists.append(entries)
    return lists


def extract_tables(soup: BeautifulSoup) -> List[List[List[str]]]:
    tables = []
    for table in soup.find_all('table'):
        rows = []
        for tr in table.find_all('tr'):
            cells = [_clean(cell.get_text()) for cell in tr.find_all(['th', 'td'])]
            if cells:
                rows.append(cells)
        if rows:
            tables.append(rows)
    return tables


def extract_page(url: str, html: str, headers: Optional[Dict[str, str]] = None,
                 status_code: int = 200) -> PageData:
    """
    Build a PageData from raw HTML.

    Args:
        url: URL the HTML was served from
        html: Raw HTML document
        headers: Response headers; names are lower-cased
        status_code: HTTP status of the response

    Returns:
        PageData ready to be placed in a CrawlResult
    """
    response_headers = {str(k).lower(): str(v) for k, v in (headers or {}).items()}
    soup = BeautifulSoup(html or '', 'lxml')

    meta = extract_meta(soup)
    json_ld = extract_json_ld(soup)
    headings = extract_headings(soup)
    faq_items = extract_faq_items(soup, json_ld)
    lists = extract_lists(soup)
    tables = extract_tables(soup)

    base_domain = urlparse(url).netloc
    internal_links, external_links = [], []
    for link in soup.find_all('a', href=True):
        href = link.get('href', '').strip()
        if not href or href.startswith(('#', 'mailto:', 'tel:', 'javascript:')):
            continue
        full_url = urljoin(url, href)
        if urlparse(full_url).netloc in (base_domain, ''):
            internal_links.append(full_url)
        else:
            external_links.append(full_url)

    images = [{'src': urljoin(url, img.get('src', '')), 'alt': img.get('alt', '')} for img in soup.find_all('img')]

    body_text = extract_body_text(soup)
    content = PageContent(
        headings=headings,
        body_text=body_text,
        word_count=len(body_text.split()),
        faq_items=faq_items,
        lists=lists,
        tables=tables,
    )

    logger.debug("Extracted %s: %d words, %d headings, %d JSON-LD blocks",
                 url, content.word_count, len(headings), len(json_ld))

    return PageData(
        url=url,
        status_code=status_code,
        content_type=response_headers.get('content-type', 'text/html'),
        html=html or '',
        meta=meta,
        content=content,
        structured_data=ExistingStructuredData(json_ld=json_ld),
        internal_links=internal_links,
        external_links=external_links,
        images=images,
        last_modified=response_headers.get('last-modified'),
        response_headers=response_headers,
    )


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        raise CrawlResultError(f"Could not read {path}: {e}") from e


def _page_path(relative: str) -> str:
    """URL path for a saved file; ``index.html`` maps to its directory."""
    if relative == 'index.html':
        return '/'
    if relative.endswith('/index.html'):
        return '/' + relative[:-len('index.html')]
    return '/' + relative


def load_site_directory(directory, base_url: str) -> CrawlResult:
    """
    Build a CrawlResult from a directory of saved pages.

    Every ``*.html`` file becomes a page. Well-known files (robots.txt,
    .well-known/security.txt, ...) are read from their site-relative paths.

    Raises:
        CrawlResultError: If the directory is missing or a file cannot be read
    """
    root = Path(directory)
    if not root.is_dir():
        raise CrawlResultError(f"Site directory not found: {root}")
    base_url = base_url.rstrip('/')

    pages = []
    for html_path in sorted(root.rglob('*.html')):
        relative = html_path.relative_to(root).as_posix()
        pages.append(extract_page(base_url + _page_path(relative), _read_text(html_path)))

    files = {}
    for attr, _key, site_path in GEO_FILES:
        file_path = root / site_path.lstrip('/')
        if file_path.is_file():
            files[attr] = _read_text(file_path) or None

    site_name = next((p.meta.og_site_name for p in pages if p.meta.og_site_name), None)
    logger.info("Loaded %d saved pages and %d policy files from %s", len(pages), len(files), root)

    return CrawlResult(
        base_url=base_url,
        domain=urlparse(base_url).netloc,
        pages=pages,
        site_identity=SiteIdentity(name=site_name),
        existing_files=ExistingGeoFiles(**files),
        crawl_stats=CrawlStats(total_pages=len(pages)),
    )
