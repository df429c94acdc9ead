"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import SharpdocConfig


def load_config(cli_path: str | None = None) -> SharpdocConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./sharpdoc.yaml"),
        Path.home() / ".sharpdoc" / "config.yaml",
    ]

    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ValueError(f"Invalid config in {path}: expected a mapping")
                raw = _expand_env_vars(raw)
                return SharpdocConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return SharpdocConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `sharpdoc config init`
DEFAULT_CONFIG_TEMPLATE = """\
# sharpdoc.yaml

# Generation service
llm:
  provider: "openai"           # openai | anthropic | ollama
  model: "gpt-4o-mini"
  api_key_env: "OPENAI_API_KEY"
  max_tokens: 1024
  temperature: 0.2
  timeout: 60
  # base_url: "http://localhost:11434"

# Retries on transient failures (connection loss, timeouts, throttling)
retry:
  max_attempts: 10
  base_delay: 0.5              # seconds, doubled on every retry
  jitter_ratio: 0.5            # random extra of up to this share of each delay
  # max_delay: 60

# Which files to annotate
discovery:
  glob: "**/*.csproj"          # .sln, .csproj or .cs patterns
  ignore_dirs: [bin, obj, .git, .vs, node_modules]

# Annotation
annotate:
  max_concurrency: 4           # files processed in parallel
  max_prompt_chars: 14000
  comment_marker: "///"
  skip_documented: false       # true: leave declarations that already have a doc comment

# Logging
log_level: "info"              # debug | info | warn | error
"""
