"""Scoring and grading utilities for GEO compliance audits."""

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple
from enum import Enum


class CheckName(Enum):
    """Stable identifiers of every audit check.

    The values are the names report renderers and the projection table key
    off, so they must never change independently of those consumers.
    """
    ROBOTS_TXT = "robots.txt"
    SITEMAP_XML = "sitemap.xml"
    LLMS_TXT = "llms.txt"
    STRUCTURED_DATA = "Structured Data (JSON-LD)"
    SERVER_RENDERING = "Server-side Rendering"
    AI_BOT_BLOCKING = "AI Bot Blocking"
    SEARCH_INDEXING = "Search Engine Indexing"
    LLMS_FULL_TXT = "llms-full.txt"
    AI_POLICY = "AI Policy (ai.txt / ai.json)"
    META_DESCRIPTIONS = "Meta Descriptions"
    HEADING_HIERARCHY = "Heading Hierarchy"
    CONTENT_FRESHNESS = "Content Freshness"
    CONTENT_DEPTH = "Content Structure & Depth"
    SECURITY_TXT = "security.txt"
    TDMREP_JSON = "tdmrep.json"
    OPEN_GRAPH = "Open Graph Tags"
    AI_CONTENT_DIRECTIVES = "AI Content Directives"
    MANIFEST_JSON = "manifest.json"
    HUMANS_TXT = "humans.txt"
    FAQ_CONTENT = "FAQ Content"


class Priority(Enum):
    """Priority tier of a check; controls its weight in the overall score."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CheckStatus(Enum):
    """Outcome of a single check."""
    PASS = "pass"
    PARTIAL = "partial"
    FAIL = "fail"
    NOT_APPLICABLE = "not_applicable"


class Grade(Enum):
    """Letter grades for the overall score."""
    A_PLUS = "A+"  # 90-100
    A = "A"        # 80-89
    B = "B"        # 70-79
    C = "C"        # 60-69
    D = "D"        # 50-59
    F = "F"        # < 50


MAX_SCORE = 100

# Crawlers whose presence in robots.txt signals deliberate AI crawler handling
KEY_AI_CRAWLERS = ('GPTBot', 'ClaudeBot', 'Google-Extended', 'PerplexityBot', 'Applebot-Extended')

# Crawlers checked for accidental "Disallow: /" blocking
BLOCKING_AI_CRAWLERS = (
    'GPTBot', 'OAI-SearchBot', 'ChatGPT-User', 'ClaudeBot', 'Claude-SearchBot',
    'Google-Extended', 'Applebot-Extended', 'Meta-ExternalAgent', 'PerplexityBot',
    'Amazonbot', 'CCBot', 'DuckAssistBot', 'Bytespider',
)

PACKAGE_RECOMMENDATION = "Included in generated package"


@dataclass(frozen=True)
class ProjectedImprovement:
    """Score a check reaches once the matching generated file is deployed."""
    score: int
    note: str


def _freeze(mapping: Dict) -> Mapping:
    return MappingProxyType(dict(mapping))


DEFAULT_TIER_WEIGHTS = _freeze({
    Priority.CRITICAL: 3.0,
    Priority.HIGH: 2.0,
    Priority.MEDIUM: 1.0,
    Priority.LOW: 0.5,
})

DEFAULT_PROJECTED_IMPROVEMENTS = _freeze({
    CheckName.ROBOTS_TXT: ProjectedImprovement(100, "AI crawler directives for 13 bots"),
    CheckName.AI_BOT_BLOCKING: ProjectedImprovement(100, "Explicit Allow directives for all AI crawlers"),
    CheckName.SITEMAP_XML: ProjectedImprovement(100, "Generated sitemap with all discovered URLs"),
    CheckName.LLMS_TXT: ProjectedImprovement(100, "Site structure per llmstxt.org"),
    CheckName.LLMS_FULL_TXT: ProjectedImprovement(100, "Full content dump for LLM ingestion"),
    CheckName.AI_POLICY: ProjectedImprovement(100, "Machine + human-readable AI policy"),
    CheckName.SECURITY_TXT: ProjectedImprovement(100, "RFC 9116 security contact file"),
    CheckName.TDMREP_JSON: ProjectedImprovement(100, "Text & data mining rights reservation"),
    CheckName.HUMANS_TXT: ProjectedImprovement(100, "Team and technology credits"),
    CheckName.MANIFEST_JSON: ProjectedImprovement(100, "Web app identity manifest"),
    CheckName.STRUCTURED_DATA: ProjectedImprovement(85, "Organization + WebSite schemas"),
})


@dataclass(frozen=True)
class ScoringConfig:
    """
    Immutable weight, threshold and lookup tables used by an audit.

    Tests and callers substitute alternate tables with
    ``dataclasses.replace(DEFAULT_SCORING_CONFIG, ...)``.
    """
    tier_weights: Mapping = field(default_factory=lambda: DEFAULT_TIER_WEIGHTS)
    default_weight: float = 1.0
    key_crawlers: Tuple[str, ...] = KEY_AI_CRAWLERS
    blocking_crawlers: Tuple[str, ...] = BLOCKING_AI_CRAWLERS
    freshness_window_days: int = 365
    projected_improvements: Mapping = field(default_factory=lambda: DEFAULT_PROJECTED_IMPROVEMENTS)

    def weight_for(self, category) -> float:
        """Weight of a tier, falling back to the default for unknown tiers."""
        return self.tier_weights.get(category, self.default_weight)

    def with_weights(self, **overrides: float) -> 'ScoringConfig':
        """Return a copy with some tier weights replaced (keys are tier values)."""
        weights = dict(self.tier_weights)
        for tier_name, weight in overrides.items():
            weights[Priority(tier_name)] = float(weight)
        return replace(self, tier_weights=_freeze(weights))


DEFAULT_SCORING_CONFIG = ScoringConfig()


def round_score(value: float) -> int:
    """Round half up, so 62.5 becomes 63 rather than banker's 62."""
    return int(math.floor(value + 0.5))


def coverage_status(coverage: float) -> CheckStatus:
    """Standard 0.8 / 0.5 coverage split used by page-coverage checks."""
    if coverage >= 0.8:
        return CheckStatus.PASS
    if coverage >= 0.5:
        return CheckStatus.PARTIAL
    return CheckStatus.FAIL


@dataclass(frozen=True)
class AuditItem:
    """Result of evaluating a single check against a crawl result."""
    name: CheckName
    category: Priority
    score: int
    status: CheckStatus
    details: str
    recommendation: str
    max_score: int = MAX_SCORE

    def __post_init__(self):
        # Clamp so every item satisfies 0 <= score <= max_score
        object.__setattr__(self, 'score', max(0, min(self.max_score, int(self.score))))

    @property
    def passed(self) -> bool:
        return self.status in (CheckStatus.PASS, CheckStatus.PARTIAL)

    def to_dict(self) -> Dict:
        return {
            'name': self.name.value,
            'category': getattr(self.category, 'value', self.category),
            'score': self.score,
            'maxScore': self.max_score,
            'status': self.status.value,
            'details': self.details,
            'recommendation': self.recommendation,
        }


@dataclass
class TierSummary:
    """Passed/total counts for one priority tier."""
    passed: int = 0
    total: int = 0

    def to_dict(self) -> Dict:
        return {'passed': self.passed, 'total': self.total}


@dataclass
class AuditResult:
    """Complete audit with overall score, grade and per-check items."""
    overall_score: int
    grade: Grade
    items: List[AuditItem] = field(default_factory=list)
    summary: Dict[Priority, TierSummary] = field(default_factory=dict)
    max_possible_score: int = MAX_SCORE

    def get_item(self, name: CheckName) -> Optional[AuditItem]:
        """Get a specific item by check name."""
        for item in self.items:
            if item.name == name:
                return item
        return None

    def to_dict(self) -> Dict:
        return {
            'overallScore': self.overall_score,
            'maxPossibleScore': self.max_possible_score,
            'grade': self.grade.value,
            'items': [item.to_dict() for item in self.items],
            'summary': {getattr(tier, 'value', tier): counts.to_dict() for tier, counts in self.summary.items()},
        }


def score_to_grade(score: float) -> Grade:
    """Map an overall score to its letter grade."""
    if score >= 90: return Grade.A_PLUS
    if score >= 80: return Grade.A
    if score >= 70: return Grade.B
    if score >= 60: return Grade.C
    if score >= 50: return Grade.D
    return Grade.F


def aggregate(items: List[AuditItem], config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> AuditResult:
    """
    Combine audit items into a weighted overall score, grade and tier summary.

    Args:
        items: Evaluated items, in report order
        config: Scoring tables supplying the tier weights

    Returns:
        AuditResult holding the items unchanged and in the same order
    """
    summary = {tier: TierSummary() for tier in Priority}
    weighted_score = 0.0
    weighted_max = 0.0

    for item in items:
        weight = config.weight_for(item.category)
        weighted_score += item.score * weight
        weighted_max += item.max_score * weight

        counts = summary.setdefault(item.category, TierSummary())
        counts.total += 1
        if item.passed:
            counts.passed += 1

    if weighted_max > 0:
        overall = round_score(weighted_score / weighted_max * 100)
    else:
        overall = 0

    return AuditResult(
        overall_score=overall,
        grade=score_to_grade(overall),
        items=list(items),
        summary=summary,
    )
