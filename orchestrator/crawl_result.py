"""Typed crawl result consumed read-only by the audit checks."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from utils.errors import CrawlResultError

logger = logging.getLogger(__name__)


def _pick(data: Dict, *keys: str, default: Any = None) -> Any:
    """Return the first key present in data (camelCase or snake_case)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _text(value: Any) -> Optional[str]:
    """Normalize an optional text field; empty strings count as absent."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value or None


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def _dict_list(value: Any) -> List[Dict]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


@dataclass(frozen=True)
class JsonLdView:
    """
    Tolerant read-only view over one untyped JSON-LD blob.

    Accessors return "absent" (None, empty list) instead of raising, so
    garbage structured data degrades to "no signal".
    """
    raw: Any

    def get(self, key: str) -> Any:
        if isinstance(self.raw, dict):
            return self.raw.get(key)
        return None

    @property
    def types(self) -> List[str]:
        value = self.get('@type')
        if isinstance(value, str) and value:
            return [value]
        if isinstance(value, list):
            return [v for v in value if isinstance(v, str) and v]
        return []

    @property
    def primary_type(self) -> str:
        types = self.types
        return types[0] if types else 'unknown'

    def has_type(self, schema_type: str) -> bool:
        return schema_type in self.types

    @property
    def has_date(self) -> bool:
        return bool(self.get('dateModified') or self.get('datePublished'))


@dataclass
class PageMeta:
    """Head metadata extracted from a page."""
    title: str = ""
    description: str = ""
    canonical: Optional[str] = None
    language: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    og_type: Optional[str] = None
    og_site_name: Optional[str] = None
    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    author: Optional[str] = None
    published_date: Optional[str] = None
    modified_date: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    robots: Optional[str] = None
    google_verification: Optional[str] = None
    bing_verification: Optional[str] = None
    yandex_verification: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'PageMeta':
        keywords = _pick(data, 'keywords', default=[])
        return cls(
            title=_text(_pick(data, 'title')) or "",
            description=_text(_pick(data, 'description')) or "",
            canonical=_text(_pick(data, 'canonical')),
            language=_text(_pick(data, 'language')),
            og_title=_text(_pick(data, 'ogTitle', 'og_title')),
            og_description=_text(_pick(data, 'ogDescription', 'og_description')),
            og_image=_text(_pick(data, 'ogImage', 'og_image')),
            og_type=_text(_pick(data, 'ogType', 'og_type')),
            og_site_name=_text(_pick(data, 'ogSiteName', 'og_site_name')),
            twitter_card=_text(_pick(data, 'twitterCard', 'twitter_card')),
            twitter_title=_text(_pick(data, 'twitterTitle', 'twitter_title')),
            twitter_description=_text(_pick(data, 'twitterDescription', 'twitter_description')),
            twitter_image=_text(_pick(data, 'twitterImage', 'twitter_image')),
            author=_text(_pick(data, 'author')),
            published_date=_text(_pick(data, 'publishedDate', 'published_date')),
            modified_date=_text(_pick(data, 'modifiedDate', 'modified_date')),
            keywords=_str_list(keywords),
            robots=_text(_pick(data, 'robots')),
            google_verification=_text(_pick(data, 'googleVerification', 'google_verification')),
            bing_verification=_text(_pick(data, 'bingVerification', 'bing_verification')),
            yandex_verification=_text(_pick(data, 'yandexVerification', 'yandex_verification')),
        )

    def to_dict(self) -> Dict:
        return {
            'title': self.title,
            'description': self.description,
            'canonical': self.canonical,
            'language': self.language,
            'ogTitle': self.og_title,
            'ogDescription': self.og_description,
            'ogImage': self.og_image,
            'ogType': self.og_type,
            'ogSiteName': self.og_site_name,
            'twitterCard': self.twitter_card,
            'twitterTitle': self.twitter_title,
            'twitterDescription': self.twitter_description,
            'twitterImage': self.twitter_image,
            'author': self.author,
            'publishedDate': self.published_date,
            'modifiedDate': self.modified_date,
            'keywords': list(self.keywords),
            'robots': self.robots,
            'googleVerification': self.google_verification,
            'bingVerification': self.bing_verification,
            'yandexVerification': self.yandex_verification,
        }


@dataclass
class HeadingNode:
    level: int
    text: str = ""


@dataclass
class FAQItem:
    question: str
    answer: str = ""


@dataclass
class PageContent:
    """Main content extracted from a page."""
    headings: List[HeadingNode] = field(default_factory=list)
    body_text: str = ""
    word_count: int = 0
    faq_items: List[FAQItem] = field(default_factory=list)
    lists: List[List[str]] = field(default_factory=list)
    tables: List[List[List[str]]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> 'PageContent':
        headings = [
            HeadingNode(level=_to_int(h.get('level')), text=str(h.get('text') or ""))
            for h in _dict_list(_pick(data, 'headings', default=[]))
        ]
        faq_items = [
            FAQItem(question=str(f.get('question') or ""), answer=str(f.get('answer') or ""))
            for f in _dict_list(_pick(data, 'faqItems', 'faq_items', default=[]))
        ]
        lists = _pick(data, 'lists', default=[])
        tables = _pick(data, 'tables', default=[])
        return cls(
            headings=headings,
            body_text=str(_pick(data, 'bodyText', 'body_text', default="") or ""),
            word_count=_to_int(_pick(data, 'wordCount', 'word_count')),
            faq_items=faq_items,
            lists=lists if isinstance(lists, list) else [],
            tables=tables if isinstance(tables, list) else [],
        )

    def to_dict(self) -> Dict:
        return {
            'headings': [{'level': h.level, 'text': h.text} for h in self.headings],
            'bodyText': self.body_text,
            'wordCount': self.word_count,
            'faqItems': [{'question': f.question, 'answer': f.answer} for f in self.faq_items],
            'lists': self.lists,
            'tables': self.tables,
        }


@dataclass
class ExistingStructuredData:
    """Structured data blobs found on a page, kept untyped."""
    json_ld: List[Any] = field(default_factory=list)
    microdata: List[Any] = field(default_factory=list)
    rdfa: List[Any] = field(default_factory=list)

    @property
    def json_ld_items(self) -> List[JsonLdView]:
        return [JsonLdView(item) for item in self.json_ld]

    @classmethod
    def from_dict(cls, data: Dict) -> 'ExistingStructuredData':
        def as_list(value):
            return list(value) if isinstance(value, list) else []
        return cls(
            json_ld=as_list(_pick(data, 'jsonLd', 'json_ld')),
            microdata=as_list(_pick(data, 'microdata')),
            rdfa=as_list(_pick(data, 'rdfa')),
        )

    def to_dict(self) -> Dict:
        return {'jsonLd': self.json_ld, 'microdata': self.microdata, 'rdfa': self.rdfa}


@dataclass
class PageData:
    """Data extracted from a single crawled page."""
    url: str
    status_code: int = 200
    content_type: str = "text/html"
    html: str = ""
    meta: PageMeta = field(default_factory=PageMeta)
    content: PageContent = field(default_factory=PageContent)
    navigation: List[Dict] = field(default_factory=list)
    breadcrumbs: List[Dict] = field(default_factory=list)
    structured_data: ExistingStructuredData = field(default_factory=ExistingStructuredData)
    internal_links: List[str] = field(default_factory=list)
    external_links: List[str] = field(default_factory=list)
    images: List[Dict] = field(default_factory=list)
    last_modified: Optional[str] = None
    response_headers: Dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str:
        """Case-insensitive response header lookup, empty string when absent."""
        return self.response_headers.get(name.lower(), "") or ""

    @property
    def robots_directives(self) -> str:
        """Meta robots and X-Robots-Tag combined, lower-cased."""
        return f"{(self.meta.robots or '').lower()} {self.header('x-robots-tag').lower()}"

    @classmethod
    def from_dict(cls, data: Dict) -> 'PageData':
        headers = _pick(data, 'responseHeaders', 'response_headers', default={})
        if not isinstance(headers, dict):
            headers = {}
        meta = _pick(data, 'meta', default={})
        content = _pick(data, 'content', default={})
        structured = _pick(data, 'existingStructuredData', 'structured_data', default={})
        return cls(
            url=str(_pick(data, 'url', default="")),
            status_code=_to_int(_pick(data, 'statusCode', 'status_code'), 200),
            content_type=str(_pick(data, 'contentType', 'content_type', default="text/html") or ""),
            html=str(_pick(data, 'html', default="") or ""),
            meta=PageMeta.from_dict(meta if isinstance(meta, dict) else {}),
            content=PageContent.from_dict(content if isinstance(content, dict) else {}),
            navigation=_dict_list(_pick(data, 'navigation', default=[])),
            breadcrumbs=_dict_list(_pick(data, 'breadcrumbs', default=[])),
            structured_data=ExistingStructuredData.from_dict(structured if isinstance(structured, dict) else {}),
            internal_links=_str_list(_pick(data, 'internalLinks', 'internal_links')),
            external_links=_str_list(_pick(data, 'externalLinks', 'external_links')),
            images=_dict_list(_pick(data, 'images', default=[])),
            last_modified=_text(_pick(data, 'lastModified', 'last_modified')),
            response_headers={str(k).lower(): str(v) for k, v in headers.items()},
        )

    def to_dict(self) -> Dict:
        return {
            'url': self.url,
            'statusCode': self.status_code,
            'contentType': self.content_type,
            'html': self.html,
            'meta': self.meta.to_dict(),
            'content': self.content.to_dict(),
            'navigation': self.navigation,
            'breadcrumbs': self.breadcrumbs,
            'existingStructuredData': self.structured_data.to_dict(),
            'internalLinks': self.internal_links,
            'externalLinks': self.external_links,
            'images': self.images,
            'lastModified': self.last_modified,
            'responseHeaders': self.response_headers,
        }


@dataclass
class SiteIdentity:
    """Site-wide identity summary."""
    name: Optional[str] = None
    tagline: Optional[str] = None
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    social_links: List[Dict] = field(default_factory=list)
    copyright: Optional[str] = None
    tech_stack: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> 'SiteIdentity':
        tech = _pick(data, 'techStack', 'tech_stack', default=[])
        return cls(
            name=_text(_pick(data, 'name')),
            tagline=_text(_pick(data, 'tagline')),
            logo_url=_text(_pick(data, 'logoUrl', 'logo_url')),
            favicon_url=_text(_pick(data, 'faviconUrl', 'favicon_url')),
            contact_email=_text(_pick(data, 'contactEmail', 'contact_email')),
            contact_phone=_text(_pick(data, 'contactPhone', 'contact_phone')),
            address=_text(_pick(data, 'address')),
            social_links=_dict_list(_pick(data, 'socialLinks', 'social_links', default=[])),
            copyright=_text(_pick(data, 'copyright')),
            tech_stack=_str_list(tech),
        )

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'tagline': self.tagline,
            'logoUrl': self.logo_url,
            'faviconUrl': self.favicon_url,
            'contactEmail': self.contact_email,
            'contactPhone': self.contact_phone,
            'address': self.address,
            'socialLinks': self.social_links,
            'copyright': self.copyright,
            'techStack': self.tech_stack,
        }


# (attribute, JSON key, path on the site)
GEO_FILES = [
    ('robots_txt', 'robotsTxt', '/robots.txt'),
    ('sitemap_xml', 'sitemapXml', '/sitemap.xml'),
    ('llms_txt', 'llmsTxt', '/llms.txt'),
    ('llms_full_txt', 'llmsFullTxt', '/llms-full.txt'),
    ('ai_txt', 'aiTxt', '/ai.txt'),
    ('ai_json', 'aiJson', '/ai.json'),
    ('security_txt', 'securityTxt', '/.well-known/security.txt'),
    ('tdmrep_json', 'tdmrepJson', '/.well-known/tdmrep.json'),
    ('humans_txt', 'humansTxt', '/humans.txt'),
    ('manifest_json', 'manifestJson', '/manifest.json'),
    ('bing_site_auth', 'bingSiteAuth', '/BingSiteAuth.xml'),
]


@dataclass
class ExistingGeoFiles:
    """Well-known policy files fetched from the site; None when absent."""
    robots_txt: Optional[str] = None
    sitemap_xml: Optional[str] = None
    llms_txt: Optional[str] = None
    llms_full_txt: Optional[str] = None
    ai_txt: Optional[str] = None
    ai_json: Optional[str] = None
    security_txt: Optional[str] = None
    tdmrep_json: Optional[str] = None
    humans_txt: Optional[str] = None
    manifest_json: Optional[str] = None
    bing_site_auth: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'ExistingGeoFiles':
        return cls(**{
            attr: _text(_pick(data, key, attr))
            for attr, key, _path in GEO_FILES
        })

    def to_dict(self) -> Dict:
        return {key: getattr(self, attr) for attr, key, _path in GEO_FILES}


@dataclass
class CrawlStats:
    total_pages: int = 0
    total_time: float = 0.0
    errors: int = 0

    @classmethod
    def from_dict(cls, data: Dict) -> 'CrawlStats':
        try:
            total_time = float(_pick(data, 'totalTime', 'total_time', default=0) or 0)
        except (TypeError, ValueError):
            total_time = 0.0
        return cls(
            total_pages=_to_int(_pick(data, 'totalPages', 'total_pages')),
            total_time=total_time,
            errors=_to_int(_pick(data, 'errors')),
        )

    def to_dict(self) -> Dict:
        return {'totalPages': self.total_pages, 'totalTime': self.total_time, 'errors': self.errors}


@dataclass
class CrawlResult:
    """
    Fully materialized output of the crawl stage.

    This is the only input the audit checks read. Checks treat it as
    immutable and never write back to it.
    """
    base_url: str
    domain: str = ""
    pages: List[PageData] = field(default_factory=list)
    site_identity: SiteIdentity = field(default_factory=SiteIdentity)
    existing_files: ExistingGeoFiles = field(default_factory=ExistingGeoFiles)
    crawl_stats: CrawlStats = field(default_factory=CrawlStats)

    @property
    def site_name(self) -> str:
        return self.site_identity.name or self.domain or self.base_url

    @classmethod
    def from_dict(cls, data: Dict) -> 'CrawlResult':
        """
        Build a crawl result from the crawl stage's JSON document.

        Raises:
            CrawlResultError: If the document is not an object or has no page list
        """
        if not isinstance(data, dict):
            raise CrawlResultError("Crawl result must be a JSON object")
        pages = data.get('pages')
        if not isinstance(pages, list):
            raise CrawlResultError("Crawl result is missing a 'pages' list")

        parsed_pages = []
        for index, page in enumerate(pages):
            if not isinstance(page, dict):
                logger.warning("Skipping page %d: expected an object, got %s", index, type(page).__name__)
                continue
            parsed_pages.append(PageData.from_dict(page))

        identity = _pick(data, 'siteIdentity', 'site_identity', default={})
        files = _pick(data, 'existingGeoFiles', 'existing_files', default={})
        stats = _pick(data, 'crawlStats', 'crawl_stats', default={})

        return cls(
            base_url=str(_pick(data, 'baseUrl', 'base_url', default="")),
            domain=str(_pick(data, 'domain', default="") or ""),
            pages=parsed_pages,
            site_identity=SiteIdentity.from_dict(identity if isinstance(identity, dict) else {}),
            existing_files=ExistingGeoFiles.from_dict(files if isinstance(files, dict) else {}),
            crawl_stats=CrawlStats.from_dict(stats if isinstance(stats, dict) else {}),
        )

    def to_dict(self) -> Dict:
        return {
            'baseUrl': self.base_url,
            'domain': self.domain,
            'pages': [p.to_dict() for p in self.pages],
            'siteIdentity': self.site_identity.to_dict(),
            'existingGeoFiles': self.existing_files.to_dict(),
            'crawlStats': self.crawl_stats.to_dict(),
        }


def load_crawl_result(path) -> CrawlResult:
    """
    Load a crawl result JSON file.

    Raises:
        CrawlResultError: If the file is missing, unreadable or malformed
    """
    crawl_path = Path(path)
    if not crawl_path.exists():
        raise CrawlResultError(f"Crawl result not found: {crawl_path}")
    try:
        data = json.loads(crawl_path.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        raise CrawlResultError(f"Could not read crawl result {crawl_path}: {e}") from e

    crawl = CrawlResult.from_dict(data)
    logger.info("Loaded crawl result for %s (%d pages)", crawl.base_url, len(crawl.pages))
    return crawl
