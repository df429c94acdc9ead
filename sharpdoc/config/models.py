from pydantic import BaseModel, Field
from typing import Literal


class LLMSettings(BaseModel):
    provider: Literal["openai", "anthropic", "ollama"] = "openai"
    model: str = "gpt-4o-mini"
    api_key_env: str = "OPENAI_API_KEY"
    max_tokens: int = Field(default=1024, gt=0)
    temperature: float = Field(default=0.2, ge=0)
    timeout: float = Field(default=60.0, gt=0)
    base_url: str | None = None


class RetrySettings(BaseModel):
    max_attempts: int = Field(default=10, gt=0)
    base_delay: float = Field(default=0.5, gt=0)
    jitter_ratio: float = Field(default=0.5, ge=0, le=1)
    max_delay: float | None = Field(default=None, gt=0)


class DiscoverySettings(BaseModel):
    glob: str = "**/*.csproj"
    ignore_dirs: list[str] = Field(
        default_factory=lambda: ["bin", "obj", ".git", ".vs", "node_modules"]
    )


class AnnotateSettings(BaseModel):
    max_concurrency: int = Field(default=4, gt=0)
    max_prompt_chars: int = Field(default=14_000, gt=0)
    comment_marker: str = "///"
    skip_documented: bool = False


class SharpdocConfig(BaseModel):
    llm: LLMSettings = Field(default_factory=LLMSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    annotate: AnnotateSettings = Field(default_factory=AnnotateSettings)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
