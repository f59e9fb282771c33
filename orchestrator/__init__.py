"""Orchestrator package for running GEO audits."""

from .crawl_result import CrawlResult, PageData, load_crawl_result
from .orchestrator import Orchestrator
from .projection import ProjectionSimulator, ProjectionComparison, generate_projected_audit

__all__ = [
    'CrawlResult', 'PageData', 'load_crawl_result',
    'Orchestrator',
    'ProjectionSimulator', 'ProjectionComparison', 'generate_projected_audit',
]
