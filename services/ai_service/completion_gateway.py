"""
Completion gateway - turns a conversation history into one upstream
chat-completion request and returns the assistant reply.
"""

import time
from typing import Dict, List, Mapping, Optional, Sequence

import openai

from config.app_config import LLMConfig, get_config, get_nvidia_api_key
from infrastructure.external.openai_client import OpenAIClientFactory, get_openai_client_factory
from services.ai_service.errors import (
    GatewayConfigError,
    UpstreamError,
    classify_openai_error,
)
from services.chat_service.models import Message
from utils.logging_config import get_logger, log_execution_time, log_model_usage


class CompletionGateway:
    """
    Stateless wrapper around the upstream chat-completions API.

    Every call uses the same model and sampling parameters; the history is
    forwarded as given. Failures surface as GatewayError subclasses.
    """

    def __init__(
        self,
        llm_config: Optional[LLMConfig] = None,
        client_factory: Optional[OpenAIClientFactory] = None
    ):
        self.logger = get_logger(__name__)
        self.llm_config = llm_config or get_config().llm
        self.client_factory = client_factory or get_openai_client_factory()

    def complete(self, messages: Sequence[Mapping[str, str]]) -> Message:
        """
        Request the next assistant message for a history

        Args:
            messages: Role/content pairs, oldest first

        Returns:
            Message: Assistant message holding the first choice's content

        Raises:
            GatewayConfigError: API key missing
            GatewayTimeoutError: upstream call timed out
            UpstreamError: any other upstream failure
        """
        api_key = get_nvidia_api_key()
        if not api_key:
            raise GatewayConfigError("NVIDIA_API_KEY is not set")

        payload: List[Dict[str, str]] = [
            {"role": m["role"], "content": m["content"]} for m in messages
        ]
        client = self.client_factory.create(api_key, timeout=self.llm_config.timeout)

        started = time.monotonic()
        try:
            with log_execution_time(self.logger, "chat_completion", message_count=len(payload)):
                completion = client.chat.completions.create(
                    messages=payload,
                    **self.llm_config.to_dict()
                )
        except openai.OpenAIError as e:
            raise classify_openai_error(e, self.llm_config.timeout) from e

        content = self._extract_content(completion)
        self._log_usage(completion, time.monotonic() - started)

        return Message.assistant(content)

    def _extract_content(self, completion) -> str:
        """First choice's message content; anything else is a malformed response"""
        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise UpstreamError(
                "Malformed completion response",
                status=200,
                body=str(completion)[:500]
            ) from e

        if not isinstance(content, str) or not content:
            raise UpstreamError("Completion response has no message content", status=200)

        return content

    def _log_usage(self, completion, elapsed: float) -> None:
        usage = getattr(completion, "usage", None)
        tokens = getattr(usage, "total_tokens", None) or 0
        log_model_usage(
            self.logger,
            self.llm_config.model,
            tokens,
            latency_ms=round(elapsed * 1000, 1)
        )


# Global gateway instance
_completion_gateway: Optional[CompletionGateway] = None


def get_completion_gateway() -> CompletionGateway:
    """Get the global completion gateway instance"""
    global _completion_gateway
    if _completion_gateway is None:
        _completion_gateway = CompletionGateway()
    return _completion_gateway
