"""
Configuration management for smart-tail

Uses pydantic-settings for environment variable parsing and validation.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .compaction.tail import SmartTailOptions
from .transcript.formatter import TranscriptOptions
from .transcript.retention import PruneOptions


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SMART_TAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Storage
    transcript_dir: str = Field(
        default="~/.smart-tail/transcripts",
        description="Directory holding one markdown transcript per session",
    )

    # Transcript formatting
    include_tools: bool = Field(default=True, description="List tool calls under assistant messages")
    include_metadata: bool = Field(default=True, description="Annotate assistant headings with agent/model")
    max_user_chars: int = Field(default=500, ge=4, description="Max characters per user message")
    max_assistant_chars: int = Field(default=1000, ge=4, description="Max characters per assistant message")

    # Smart tail
    tail_max_tokens: int = Field(default=1200, ge=1, description="Token budget for the injected tail")

    # Retention
    prune_max_count: int = Field(default=20, ge=0, description="Max transcript files to keep")
    prune_max_age_days: float = Field(default=7, ge=0, description="Max transcript age in days")

    @field_validator("transcript_dir", mode="after")
    @classmethod
    def expand_transcript_dir(cls, v: str) -> str:
        return str(Path(v).expanduser())

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() if v else "INFO"

    def transcript_options(self) -> TranscriptOptions:
        """Get formatter options."""
        return TranscriptOptions(
            include_tools=self.include_tools,
            include_metadata=self.include_metadata,
            max_user_chars=self.max_user_chars,
            max_assistant_chars=self.max_assistant_chars,
        )

    def tail_options(self) -> SmartTailOptions:
        """Get tail options pointing at the configured transcript directory."""
        return SmartTailOptions(
            transcript_dir=self.transcript_dir,
            max_tokens=self.tail_max_tokens,
        )

    def prune_options(self) -> PruneOptions:
        """Get retention options."""
        return PruneOptions(
            max_count=self.prune_max_count,
            max_age_days=self.prune_max_age_days,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
