"""Special-type folding exports."""

from .constant_extraction import extract_constants
from .transformer_registry import (
    CONFIG_FIELD,
    FILE_DISCRIMINATOR,
    IMAGE_DISCRIMINATOR,
    MARKER_FIELD,
    MarkerRule,
    TransformerRegistry,
    TransformerRule,
    default_registry,
    process_special_types,
    register_type_transformer,
    shared_registry,
)

__all__ = [
    "CONFIG_FIELD",
    "FILE_DISCRIMINATOR",
    "IMAGE_DISCRIMINATOR",
    "MARKER_FIELD",
    "MarkerRule",
    "TransformerRegistry",
    "TransformerRule",
    "default_registry",
    "extract_constants",
    "process_special_types",
    "register_type_transformer",
    "shared_registry",
]
