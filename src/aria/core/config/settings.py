"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """ARIA wellness server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Default to loopback: the wellness server carries personal mood and journal
    # data and has no auth layer. Opt into `0.0.0.0` explicitly.
    aria_host: str = "127.0.0.1"
    aria_port: int = 8010
    aria_log_level: str = "info"
    aria_allow_insecure_bind: bool = False
    # stdio for desktop MCP clients that launch the server themselves
    aria_transport: Literal["streamable-http", "stdio"] = "streamable-http"

    # Conversation LLM
    llm_provider: Literal["anthropic", "openai", "mock"] = "anthropic"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    max_tokens: int = 512
    temperature: float = 0.7

    # Storage (one JSON file per collection)
    aria_data_dir: str = "~/.aria"

    # Encryption: when set, private collections (wellness entries, conversation
    # context) are Fernet-encrypted instead of base64-obfuscated.
    encryption_key: str = ""

    # Voice
    voice_listen_seconds: float = 15.0

    # Seed the three starter habits on first run
    seed_default_habits: bool = True


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
