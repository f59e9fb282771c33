"""Check package: one class per GEO audit check."""

from .base_check import BaseCheck, FilePresenceCheck
from .policy_files import (
    RobotsTxtCheck, SitemapCheck, LlmsTxtCheck, AiPolicyCheck,
    LlmsFullTxtCheck, SecurityTxtCheck, TdmRepCheck, ManifestCheck, HumansTxtCheck,
)
from .crawler_access import AiBotBlockingCheck, SearchIndexingCheck
from .content import ServerRenderingCheck, HeadingHierarchyCheck, ContentFreshnessCheck, ContentDepthCheck
from .metadata import MetaDescriptionsCheck, OpenGraphCheck, AiContentDirectivesCheck
from .structured_data import StructuredDataCheck, FaqContentCheck

# Audit order: critical, high, medium, low
ALL_CHECKS = [
    RobotsTxtCheck,
    SitemapCheck,
    LlmsTxtCheck,
    StructuredDataCheck,
    ServerRenderingCheck,
    AiBotBlockingCheck,
    SearchIndexingCheck,
    LlmsFullTxtCheck,
    AiPolicyCheck,
    MetaDescriptionsCheck,
    HeadingHierarchyCheck,
    ContentFreshnessCheck,
    ContentDepthCheck,
    SecurityTxtCheck,
    TdmRepCheck,
    OpenGraphCheck,
    AiContentDirectivesCheck,
    ManifestCheck,
    HumansTxtCheck,
    FaqContentCheck,
]

__all__ = [
    'BaseCheck', 'FilePresenceCheck', 'ALL_CHECKS',
    'RobotsTxtCheck', 'SitemapCheck', 'LlmsTxtCheck', 'AiPolicyCheck',
    'LlmsFullTxtCheck', 'SecurityTxtCheck', 'TdmRepCheck', 'ManifestCheck', 'HumansTxtCheck',
    'AiBotBlockingCheck', 'SearchIndexingCheck',
    'ServerRenderingCheck', 'HeadingHierarchyCheck', 'ContentFreshnessCheck', 'ContentDepthCheck',
    'MetaDescriptionsCheck', 'OpenGraphCheck', 'AiContentDirectivesCheck',
    'StructuredDataCheck', 'FaqContentCheck',
]
