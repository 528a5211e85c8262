"""
Pipeline Errors
Exception hierarchy shared by every stage of the digest pipeline
"""

from typing import List


class PipelineError(Exception):
    """Base exception for digest pipeline errors"""
    pass


class ConfigError(PipelineError):
    """Raised when a required setting is missing or invalid"""
    pass


class FeedFetchError(PipelineError):
    """Raised when a single feed source cannot be downloaded or parsed"""

    def __init__(self, source: str, cause):
        self.source = source
        self.cause = cause
        super().__init__(f"error fetching {source}: {cause}")


class AllFeedsFailedError(PipelineError):
    """Raised when every feed source failed; the run cannot continue"""

    def __init__(self, errors: List[FeedFetchError]):
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"all {len(self.errors)} feeds failed: {details}")


class HistoryStoreError(PipelineError):
    """Raised when the send-history store cannot be read or written"""
    pass


class OracleError(PipelineError):
    """Base exception for failed oracle calls"""
    pass


class OracleOverloadedError(OracleError):
    """The oracle signalled overload or rate limiting; safe to retry"""
    pass


class ScoreParseError(OracleError):
    """The oracle answered a score request with something that is not a number"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"invalid score format: {text!r}")


class RetriesExhaustedError(OracleError):
    """Every attempt failed with a retryable error"""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"max retries exceeded after {attempts} attempts: {last_error}")
