"""Utilities package for the GEO audit tool."""

from .errors import AuditError, CrawlResultError, ValidationError, ReportError
from .scoring import (
    AuditItem, AuditResult, CheckName, CheckStatus, Grade, Priority, TierSummary,
    ScoringConfig, DEFAULT_SCORING_CONFIG, aggregate, score_to_grade,
)
from .robots import RobotsDirectiveAnalyzer
from .report import generate_html_report, generate_comparison_report, generate_summary_json

__all__ = [
    'AuditError', 'CrawlResultError', 'ValidationError', 'ReportError',
    'AuditItem', 'AuditResult', 'CheckName', 'CheckStatus', 'Grade', 'Priority', 'TierSummary',
    'ScoringConfig', 'DEFAULT_SCORING_CONFIG', 'aggregate', 'score_to_grade',
    'RobotsDirectiveAnalyzer',
    'generate_html_report', 'generate_comparison_report', 'generate_summary_json',
]
