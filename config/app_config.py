"""
Unified Configuration System for the Data Structures Assistant

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
Both the Streamlit UI and the chat API server read their settings from here.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import os
from pathlib import Path


DEFAULT_NVIDIA_BASE_URL = "https://integrate.api.nvidia.com/v1"
DEFAULT_CHAT_API_URL = "http://localhost:8000/api/chat"


@dataclass
class APIConfig:
    """Upstream provider settings"""
    nvidia_api_key: str = ""
    base_url: str = DEFAULT_NVIDIA_BASE_URL

    @classmethod
    def from_env(cls) -> 'APIConfig':
        """Load API config from environment variables"""
        return cls(
            nvidia_api_key=os.getenv("NVIDIA_API_KEY", ""),
            base_url=os.getenv("NVIDIA_BASE_URL", DEFAULT_NVIDIA_BASE_URL)
        )


@dataclass
class LLMConfig:
    """Language model configuration (fixed for every completion request)"""
    model: str = "meta/llama-3.1-8b-instruct"
    temperature: float = 0.2
    top_p: float = 0.7
    max_tokens: int = 1024
    timeout: float = 30.0

    def to_dict(self) -> Dict[str, Any]:
        """Sampling parameters as passed to the chat-completions API"""
        return {
            "model": self.model,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens
        }


@dataclass
class ClientConfig:
    """Settings used by the UI to reach the chat API server"""
    chat_api_url: str = DEFAULT_CHAT_API_URL
    # Outlasts LLMConfig.timeout so the server's timeout error reaches the UI
    timeout: float = 35.0

    @classmethod
    def from_secrets(cls) -> 'ClientConfig':
        """Load client config from Streamlit secrets, falling back to the environment"""
        # In test environment, prefer environment variables
        if os.getenv("PYTEST_CURRENT_TEST") is not None:
            return cls(chat_api_url=os.getenv("CHAT_API_URL", DEFAULT_CHAT_API_URL))

        try:
            import streamlit as st
            return cls(chat_api_url=st.secrets.get("CHAT_API_URL", os.getenv("CHAT_API_URL", DEFAULT_CHAT_API_URL)))
        except Exception:
            # No secrets.toml, or not running under Streamlit
            return cls(chat_api_url=os.getenv("CHAT_API_URL", DEFAULT_CHAT_API_URL))


@dataclass
class ServerConfig:
    """Chat API server settings"""
    host: str = field(default_factory=lambda: os.getenv("SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("SERVER_PORT", "8000")))
    reload: bool = False


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "Data Structures Assistant"
    sidebar_title: str = "Conversation Log"
    default_conversation_name: str = "Default Conversation"
    welcome_messages: List[str] = field(default_factory=lambda: [
        "Welcome to the Data Structures Tutor!",
        "How can I assist you today?"
    ])
    fallback_message: str = "Sorry, I couldn't process that request."
    input_placeholder: str = "Type a message..."
    search_placeholder: str = "Search..."
    name_placeholder: str = "Name this conversation"
    typing_indicator: str = "..."
    preview_length: int = 30


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = False
    log_file: str = "logs/app.log"


@dataclass
class AppConfig:
    """Main application configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration with environment overrides"""
        from config.environments import get_environment_config

        config = get_environment_config()

        config.api = APIConfig.from_env()
        config.client = ClientConfig.from_secrets()

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if not self.api.nvidia_api_key:
            errors.append("NVIDIA API key is required (set NVIDIA_API_KEY)")

        if not 0.0 <= self.llm.temperature <= 2.0:
            errors.append(f"LLM temperature out of range: {self.llm.temperature}")

        if not 0.0 < self.llm.top_p <= 1.0:
            errors.append(f"LLM top_p out of range: {self.llm.top_p}")

        if self.llm.max_tokens <= 0:
            errors.append(f"LLM max_tokens must be positive: {self.llm.max_tokens}")

        if self.llm.timeout <= 0 or self.client.timeout <= 0:
            errors.append("Timeouts must be positive")
        elif self.client.timeout <= self.llm.timeout:
            errors.append(
                f"Client timeout ({self.client.timeout}s) must exceed the LLM timeout ({self.llm.timeout}s)"
            )

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        return errors


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = AppConfig.load()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()


def get_nvidia_api_key() -> str:
    """
    Read the upstream API key from the process environment.

    Read on every call rather than from the cached config so that a key
    exported after startup is picked up by the next request.
    """
    return os.getenv("NVIDIA_API_KEY", "")
