from .loader import load_config
from .models import (
    AnnotateSettings,
    DiscoverySettings,
    LLMSettings,
    RetrySettings,
    SharpdocConfig,
)

__all__ = [
    "AnnotateSettings",
    "DiscoverySettings",
    "LLMSettings",
    "RetrySettings",
    "SharpdocConfig",
    "load_config",
]
