"""AtMyApp content definitions: reference type helpers and the `ama` CLI."""

import logging

from .types import (
    AmaComponentConfig,
    AmaComponentRef,
    AmaComponentStructure,
    AmaContentRef,
    AmaFileConfig,
    AmaFileRef,
    AmaFileStructure,
    AmaImageConfig,
    AmaImageRef,
    AmaImageStructure,
    AmaMaxSize,
    AmaRatioHint,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AmaComponentConfig",
    "AmaComponentRef",
    "AmaComponentStructure",
    "AmaContentRef",
    "AmaFileConfig",
    "AmaFileRef",
    "AmaFileStructure",
    "AmaImageConfig",
    "AmaImageRef",
    "AmaImageStructure",
    "AmaMaxSize",
    "AmaRatioHint",
]
