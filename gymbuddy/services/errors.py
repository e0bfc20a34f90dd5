"""
Error types raised by the partner recommendation pipeline.

Each error carries the machine-readable `error` code and HTTP status that the
API layer renders as `{"error": ..., "details": ...}`.
"""

from typing import Any, Dict, Optional


class RecommendationError(Exception):
    """Base class for terminal recommendation pipeline failures."""

    error_code = "recommendation_error"
    status_code = 500

    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error_code, "details": self.details}


class ProfileNotFoundError(RecommendationError):
    """The requester has no stored profile."""

    error_code = "not_found"
    status_code = 404


class NoCandidatesError(RecommendationError):
    """Nobody is left after excluding the requester and their friends."""

    error_code = "no_candidates"
    status_code = 404


class UpstreamUnavailableError(RecommendationError):
    """The AI endpoint failed or returned no usable candidate."""

    error_code = "upstream_unavailable"
    status_code = 500


class UpstreamTimeoutError(UpstreamUnavailableError):
    """The AI endpoint did not answer within the configured timeout."""

    error_code = "upstream_timeout"
    status_code = 504


class MalformedUpstreamResponseError(RecommendationError):
    """The AI answered, but not with a JSON array of objects."""

    error_code = "malformed_upstream_response"
    status_code = 500

    def __init__(self, details: str, raw_response: Optional[str] = None) -> None:
        super().__init__(details)
        self.raw_response = raw_response

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["raw_response"] = self.raw_response
        return payload
