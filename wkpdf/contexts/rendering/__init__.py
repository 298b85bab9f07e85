"""
Rendering Context

Responsibilities:
- Validates render configuration
- Manages the scratch HTML file of each pipeline
- Builds the renderer command line and runs the renderer
- Classifies renderer results into PDF bytes or typed errors

Owns: scratch files, renderer invocation, result classification
Never: Emits HTTP headers or writes output files (see delivery context)
"""

from wkpdf.contexts.rendering.config import (
    ConfigCheck,
    Orientation,
    PageSize,
    RenderConfig,
    validate_config,
)
from wkpdf.contexts.rendering.exceptions import (
    ConfigurationError,
    ProcessError,
    RenderError,
    RenderTimeoutError,
    SpawnError,
    StorageError,
    WkpdfError,
)
from wkpdf.contexts.rendering.pipeline import RenderPipeline, RenderState, classify_result

__all__ = [
    "ConfigCheck",
    "ConfigurationError",
    "Orientation",
    "PageSize",
    "ProcessError",
    "RenderConfig",
    "RenderError",
    "RenderPipeline",
    "RenderState",
    "RenderTimeoutError",
    "SpawnError",
    "StorageError",
    "WkpdfError",
    "classify_result",
    "validate_config",
]
