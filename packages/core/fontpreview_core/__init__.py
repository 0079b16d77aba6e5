"""Core services for fontpreview: settings, errors, logging and dependency checks."""

from .config import PreviewConfig, apply_overrides, config_path, load_config, validate_config
from .dependencies import check_dependencies, required_tools
from .errors import (
    CommandFailure,
    CommandTimeout,
    FontPreviewError,
    Interrupted,
    InvalidConfiguration,
    MissingDependency,
    RasterizationFailure,
    UnknownOption,
    ViewerCrash,
    format_error,
)

__all__ = [
    "CommandFailure",
    "CommandTimeout",
    "FontPreviewError",
    "Interrupted",
    "InvalidConfiguration",
    "MissingDependency",
    "PreviewConfig",
    "RasterizationFailure",
    "UnknownOption",
    "ViewerCrash",
    "apply_overrides",
    "check_dependencies",
    "config_path",
    "format_error",
    "load_config",
    "required_tools",
    "validate_config",
]
