"""Igniter scaffolder -- generates feature directories from schema models.

Quick usage::

    from igniter.config import Config
    from igniter.scaffolder import FeatureGenerator

    generator = FeatureGenerator(Config(base_path=Path("my-app")))
    result = await generator.generate("Post")
"""

from igniter.scaffolder.generator import (
    BatchResult,
    FeatureGenerationError,
    FeatureGenerator,
    FeatureResult,
    FieldSource,
)
from igniter.scaffolder.templates import TemplateRenderer

__all__ = [
    "BatchResult",
    "FeatureGenerationError",
    "FeatureGenerator",
    "FeatureResult",
    "FieldSource",
    "TemplateRenderer",
]
