"""
OpenAI-compatible client adapter for the upstream chat-completion provider.
Builds `openai.OpenAI` clients pointed at the NVIDIA-hosted endpoint.
"""

from typing import Optional

import httpx
import openai

from config.app_config import get_config
from utils.logging_config import get_logger


class OpenAIClientFactory:
    """
    Creates openai clients for the upstream provider.

    A client is built per request because the API key is read from the
    environment at request time. All of them share one httpx.Client, so
    connections to the provider are pooled across requests.
    """

    def __init__(self, base_url: Optional[str] = None, http_client: Optional[httpx.Client] = None):
        self.logger = get_logger(__name__)
        self.config = get_config()
        self.base_url = base_url or self.config.api.base_url
        self.http_client = http_client or openai.DefaultHttpxClient()

    def create(self, api_key: str, timeout: float) -> openai.OpenAI:
        """
        Build a client for one request

        Args:
            api_key: Provider API key
            timeout: Request timeout in seconds

        Returns:
            openai.OpenAI: Client with SDK retries disabled
        """
        client = openai.OpenAI(
            api_key=api_key,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=0,
            http_client=self.http_client
        )
        self.logger.debug(f"OpenAI client created for {self.base_url}")
        return client


# Global factory instance
_client_factory: Optional[OpenAIClientFactory] = None


def get_openai_client_factory() -> OpenAIClientFactory:
    """Get the global OpenAI client factory"""
    global _client_factory
    if _client_factory is None:
        _client_factory = OpenAIClientFactory()
    return _client_factory
