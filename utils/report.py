"""HTML and JSON report generation for GEO audits."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, BaseLoader, TemplateError
from markupsafe import Markup

from utils.errors import ReportError
from utils.scoring import AuditResult, CheckStatus, Grade, Priority

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

TIER_SECTIONS = [
    ('Critical', Priority.CRITICAL),
    ('High Priority', Priority.HIGH),
    ('Medium Priority', Priority.MEDIUM),
    ('Low Priority', Priority.LOW),
]

PRIORITY_LABELS = {
    Priority.CRITICAL: 'Critical',
    Priority.HIGH: 'High Priority',
    Priority.MEDIUM: 'Medium',
    Priority.LOW: 'Low',
}


def grade_color(grade: Grade) -> str:
    """Color for a letter grade badge."""
    if grade in (Grade.A_PLUS, Grade.A):
        return '#22c55e'
    if grade == Grade.B:
        return '#3b82f6'
    if grade == Grade.C:
        return '#eab308'
    if grade == Grade.D:
        return '#f97316'
    return '#ef4444'


def score_color(score: int) -> str:
    """Color for a 0-100 score bar."""
    if score >= 70:
        return '#22c55e'
    if score >= 40:
        return '#eab308'
    return '#ef4444'


def status_icon(status: CheckStatus) -> Markup:
    if status == CheckStatus.PASS:
        return Markup('&#10003;')
    if status == CheckStatus.PARTIAL:
        return Markup('~')
    return Markup('&#10005;')


def get_template(name: str) -> str:
    """Load an HTML template from the templates directory."""
    template_path = TEMPLATE_DIR / name
    if not template_path.exists():
        raise ReportError(str(template_path), "template not found")
    return template_path.read_text(encoding='utf-8')


def _create_jinja_env():
    """Create a Jinja2 Environment with custom filters."""
    env = Environment(loader=BaseLoader(), autoescape=True)
    env.filters['grade_color'] = grade_color
    env.filters['score_color'] = score_color
    env.filters['status_icon'] = status_icon
    env.filters['priority_label'] = lambda tier: PRIORITY_LABELS.get(tier, str(getattr(tier, 'value', tier)))
    return env


def _render(template_name: str, template_context: Dict) -> str:
    env = _create_jinja_env()
    try:
        template = env.from_string(get_template(template_name))
        return template.render(**template_context)
    except TemplateError as e:
        raise ReportError(template_name, f"render failed: {e}") from e


def _write(output_path, html_content: str) -> str:
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html_content, encoding='utf-8')
    except OSError as e:
        raise ReportError(str(path), f"write failed: {e}") from e
    logger.info("Report written: %s", path)
    return str(path)


def _tier_sections(audit: AuditResult) -> List[Dict]:
    sections = []
    for title, tier in TIER_SECTIONS:
        items = [item for item in audit.items if item.category == tier]
        if items:
            sections.append({'title': title, 'tier': tier, 'items': items})
    return sections


def generate_html_report(audit: AuditResult, crawl, output_path: str) -> str:
    """
    Generate the HTML audit report.

    Args:
        audit: Audit result to render
        crawl: Crawl result the audit was run on (site name, stats)
        output_path: Path to save the HTML report

    Returns:
        Path to generated report

    Raises:
        ReportError: If the template is missing or the file cannot be written
    """
    template_context = {
        'audit': audit,
        'site_name': crawl.site_name,
        'base_url': crawl.base_url,
        'pages_crawled': crawl.crawl_stats.total_pages or len(crawl.pages),
        'sections': _tier_sections(audit),
        'summary': audit.summary,
        'tiers': [tier for _, tier in TIER_SECTIONS],
    }
    return _write(output_path, _render('audit_report.html', template_context))


def generate_comparison_report(before: AuditResult, after: AuditResult, crawl, output_path: str) -> str:
    """
    Generate the before/after comparison report.

    Items are grouped into those the package fixes, those that still need
    the site owner's attention, and those that were already at full score.
    """
    from orchestrator.projection import ProjectionSimulator

    comparison = ProjectionSimulator().compare(before, after)
    template_context = {
        'before': before,
        'after': after,
        'site_name': crawl.site_name,
        'base_url': crawl.base_url,
        'score_change': comparison.score_change,
        'fixed': comparison.fixed,
        'needs_attention': comparison.needs_attention,
        'already_good': comparison.already_good,
    }
    return _write(output_path, _render('comparison_report.html', template_context))


def generate_summary_json(audit: AuditResult, crawl, generated_at: Optional[datetime] = None) -> str:
    """Machine-readable audit summary, pretty-printed with a trailing newline."""
    generated_at = generated_at or datetime.now(timezone.utc)
    audit_dict = audit.to_dict()
    for item in audit_dict['items']:
        item.pop('maxScore', None)

    summary = {
        'site': {
            'url': crawl.base_url,
            'domain': crawl.domain,
            'name': crawl.site_identity.name,
            'pagesCrawled': crawl.crawl_stats.total_pages,
            'crawlTimeMs': crawl.crawl_stats.total_time,
        },
        'audit': {
            'overallScore': audit_dict['overallScore'],
            'grade': audit_dict['grade'],
            'summary': audit_dict['summary'],
            'items': audit_dict['items'],
        },
        'generated': generated_at.isoformat(),
    }
    return json.dumps(summary, indent=2) + '\n'
