"""Генератор типизированных Python клиентов из OpenAPI"""

from .config import GeneratorConfig
from .exceptions import (
    ArtifactWriteError,
    ConfigError,
    GeneratorError,
    ResolutionError,
    SpecLoadError,
)
from .generator import ApiClientGenerator, generate_client

__all__ = [
    "ApiClientGenerator",
    "generate_client",
    "GeneratorConfig",
    "GeneratorError",
    "SpecLoadError",
    "ResolutionError",
    "ConfigError",
    "ArtifactWriteError",
]
