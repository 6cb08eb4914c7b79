"""
Typed errors raised by the completion gateway.

Each error carries a short error_type tag that the HTTP layer puts in the
response body, and a retryable flag callers can use to decide whether
resending the same history makes sense.
"""

from typing import Optional

import openai


# Upstream statuses worth resending the same request for
RETRYABLE_STATUS_CODES = frozenset({408, 409, 429})


class GatewayError(Exception):
    """Base class for completion gateway failures"""
    error_type = "gateway"
    retryable = False


class GatewayConfigError(GatewayError):
    """Gateway is not configured (e.g. missing API key); raised before any network call"""
    error_type = "config"


class GatewayTimeoutError(GatewayError):
    """Upstream provider did not answer within the configured timeout"""
    error_type = "timeout"
    retryable = True

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Upstream request timed out after {timeout:.0f}s")


class UpstreamError(GatewayError):
    """Upstream provider failed: non-2xx status, unreachable, or unusable body"""
    error_type = "upstream"

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        # Connection failures have no status
        if self.status is None:
            return True
        return self.status in RETRYABLE_STATUS_CODES or self.status >= 500


def classify_openai_error(error: openai.OpenAIError, timeout: float) -> GatewayError:
    """
    Map an openai SDK exception onto the gateway error taxonomy

    Args:
        error: Exception raised by the openai client
        timeout: Timeout that was in force, for the timeout message

    Returns:
        The typed gateway error to raise in its place
    """
    # APITimeoutError subclasses APIConnectionError, so check it first
    if isinstance(error, openai.APITimeoutError):
        return GatewayTimeoutError(timeout)

    if isinstance(error, openai.APIConnectionError):
        return UpstreamError(f"Could not reach upstream provider: {error}")

    if isinstance(error, openai.APIStatusError):
        return UpstreamError(
            f"Upstream provider returned HTTP {error.status_code}",
            status=error.status_code,
            body=error.response.text
        )

    return UpstreamError(f"Upstream provider error: {error}")
