"""Structured error types for the GEO audit system.

The scoring engine itself never raises on bad site data; these errors cover
the edges around it (loading input, configuration, writing reports).
"""

class AuditError(Exception):
    """Base exception for audit errors."""
    pass

class CrawlResultError(AuditError):
    """Crawl result document could not be loaded or is malformed."""
    pass

class ValidationError(AuditError):
    """Error for invalid input (config values, CLI arguments, etc.)."""
    pass

class ReportError(AuditError):
    """Error while rendering or writing a report."""
    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Report '{path}': {message}")
