#!/usr/bin/env python3
"""
GEO Audit Tool

Scores a crawled website's readiness for AI crawlers and search engines,
and projects the score after the generated GEO package is deployed.

Usage:
    python audit.py --crawl crawl.json [--output ./output/] [--verbose]
    python audit.py --config path/to/config.txt [--now 2025-06-01T00:00:00Z] [--audit-only]
    python audit.py --site-dir ./saved-site/ --base-url https://example.com
"""

import argparse
import os
import sys
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Dict, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


# Load .env file if present
def load_env_file():
    """Load environment variables from .env file."""
    env_paths = [
        Path(__file__).parent / ".env",
        Path.cwd() / ".env"
    ]
    for env_path in env_paths:
        if env_path.exists():
            with open(env_path, 'r') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        os.environ.setdefault(key.strip(), value.strip())
            print(f"Loaded environment from: {env_path}")
            return True
    return False


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from orchestrator.crawl_result import CrawlResult, load_crawl_result
from orchestrator.orchestrator import Orchestrator
from utils.errors import AuditError, ValidationError
from utils.extractor import load_site_directory
from utils.report import generate_html_report, generate_comparison_report, generate_summary_json
from utils.scoring import AuditResult, CheckStatus, Priority, ScoringConfig, DEFAULT_SCORING_CONFIG

STATUS_MARKS = {
    CheckStatus.PASS: '✓',
    CheckStatus.PARTIAL: '~',
}


def parse_config(config_path: str) -> dict:
    """Parse the configuration file."""
    config = {}
    with open(config_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            # Skip empty lines, comments, and markdown-style content
            if not line or line.startswith('#') or line.startswith('`'):
                continue
            if '=' in line:
                key, value = line.split('=', 1)
                config[key.strip()] = value.strip()
    return config


def scoring_config_from(config: Dict[str, str]) -> ScoringConfig:
    """
    Build the scoring tables, applying any ``weight_<tier>`` overrides.

    Raises:
        ValidationError: For unknown tiers or non-numeric / negative weights
    """
    tiers = {tier.value for tier in Priority}
    overrides = {}
    for key, value in config.items():
        if not key.startswith('weight_'):
            continue
        tier = key[len('weight_'):]
        if tier not in tiers:
            raise ValidationError(f"Unknown priority tier in '{key}'. Expected one of: {', '.join(sorted(tiers))}")
        try:
            weight = float(value)
        except ValueError:
            raise ValidationError(f"Weight '{key}' must be a number, got '{value}'")
        if weight < 0:
            raise ValidationError(f"Weight '{key}' must not be negative")
        overrides[tier] = weight

    if not overrides:
        return DEFAULT_SCORING_CONFIG
    return DEFAULT_SCORING_CONFIG.with_weights(**overrides)


def parse_now(value: Optional[str]) -> Optional[datetime]:
    """
    Parse the reference time for freshness checks.

    Raises:
        ValidationError: If the value is not a recognisable timestamp
    """
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except ValueError:
        raise ValidationError(f"Invalid --now timestamp: '{value}' (expected ISO 8601)")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_settings(args, config: Dict[str, str]) -> Dict:
    """Merge command-line flags over config file values over environment defaults."""
    site_dir = getattr(args, 'site_dir', None) or config.get('site_dir')
    base_url = getattr(args, 'base_url', None) or config.get('base_url')
    crawl_file = args.crawl or config.get('crawl_file') or os.environ.get('GEO_AUDIT_CRAWL_FILE')
    if site_dir and not base_url:
        raise ValidationError("--site-dir needs --base-url (or base_url in config)")
    if not crawl_file and not site_dir:
        raise ValidationError("A crawl result is required (--crawl, --site-dir or crawl_file in config)")

    output_dir = args.output or config.get('output_dir') or os.environ.get('GEO_AUDIT_OUTPUT_DIR') or './output/'

    return {
        'crawl_file': Path(crawl_file) if crawl_file else None,
        'site_dir': Path(site_dir) if site_dir else None,
        'base_url': base_url,
        'output_dir': Path(output_dir),
        'now': parse_now(args.now or config.get('now')),
        'scoring': scoring_config_from(config),
    }


def run_audit_pipeline(crawl: CrawlResult, scoring: ScoringConfig = DEFAULT_SCORING_CONFIG,
                       now: Optional[datetime] = None, verbose: bool = False,
                       progress_callback=None) -> tuple:
    """
    Core audit pipeline.

    Args:
        crawl: Loaded crawl result
        scoring: Scoring tables
        now: Reference time for freshness checks
        verbose: Enable verbose output
        progress_callback: Optional callback(phase, status, detail) for progress updates

    Returns:
        Tuple of (before AuditResult, projected AuditResult)
    """
    orchestrator = Orchestrator(scoring, now=now, verbose=verbose, progress_callback=progress_callback)
    orchestrator.register_all_checks()
    before = orchestrator.run_audit(crawl)
    after = orchestrator.run_projection(before)
    return before, after


def print_audit(audit: AuditResult):
    """Print the per-item summary table."""
    for item in audit.items:
        mark = STATUS_MARKS.get(item.status, '✗')
        print(f"  {mark} {item.name.value:<30} {item.score:>3}/{item.max_score}  {item.details}")
    print(f"\nOverall Score: {audit.overall_score}/{audit.max_possible_score} (Grade {audit.grade.value})")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='GEO Audit Tool - AI crawler readiness scoring and projection'
    )

    parser.add_argument('--crawl', help='Path to crawl result JSON')
    parser.add_argument('--site-dir', help='Directory of saved HTML pages and policy files (instead of --crawl)')
    parser.add_argument('--base-url', help='Site URL the saved pages were served from (with --site-dir)')
    parser.add_argument('--config', '-c', help='Path to config.txt file')
    parser.add_argument('--output', '-o', help='Output directory for reports')
    parser.add_argument('--now', help='Reference time for freshness checks (ISO 8601)')
    parser.add_argument('--audit-only', action='store_true', help='Print the audit without writing reports')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    load_env_file()

    config = {}
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}")
            sys.exit(1)
        print(f"Loading configuration from: {config_path}")
        config = parse_config(str(config_path))

    print("\n" + "="*60)
    print("  GEO AUDIT TOOL")
    print("="*60 + "\n")

    try:
        settings = resolve_settings(args, config)
        if settings['site_dir']:
            crawl = load_site_directory(settings['site_dir'], settings['base_url'])
        else:
            crawl = load_crawl_result(settings['crawl_file'])
    except AuditError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Site: {crawl.site_name}")
    print(f"URL: {crawl.base_url}")
    print(f"Pages: {len(crawl.pages)}\n")

    before, after = run_audit_pipeline(
        crawl,
        scoring=settings['scoring'],
        now=settings['now'],
        verbose=args.verbose,
    )

    print_audit(before)

    if args.audit_only:
        return

    print("\n" + "-"*50)
    print("  Generating Reports")
    print("-"*50)

    output_dir = settings['output_dir']
    try:
        report_path = generate_html_report(before, crawl, str(output_dir / 'audit-report.html'))
        summary_path = output_dir / 'summary.json'
        summary_path.write_text(generate_summary_json(before, crawl), encoding='utf-8')
        comparison_path = generate_comparison_report(before, after, crawl, str(output_dir / 'comparison-report.html'))
    except (AuditError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\n{'='*60}")
    print(f"  AUDIT COMPLETE")
    print(f"{'='*60}")
    print(f"\nAudit report: {report_path}")
    print(f"Summary: {summary_path}")
    print(f"Comparison report: {comparison_path}")
    print(f"\nProjected Score: {before.overall_score} -> {after.overall_score} (Grade {after.grade.value})")


if __name__ == "__main__":
    main()
