"""
AI service - handles the upstream chat-completion call and its error taxonomy.
"""

from .completion_gateway import CompletionGateway, get_completion_gateway
from .errors import (
    GatewayError,
    GatewayConfigError,
    GatewayTimeoutError,
    UpstreamError,
    classify_openai_error
)

__all__ = [
    'CompletionGateway',
    'get_completion_gateway',
    'GatewayError',
    'GatewayConfigError',
    'GatewayTimeoutError',
    'UpstreamError',
    'classify_openai_error'
]
