"""Reference type helpers for declaring AMA content definitions.

Definitions are declared as type aliases whose name starts with ``_AMA_``::

    class LandingContent(TypedDict):
        title: str
        description: str

    type _AMA_Landing = AmaContentRef[Literal["landing/content.json"], LandingContent]

`ama migrate` reads these declarations statically; the module that holds them
is never imported.
"""

from __future__ import annotations

from typing import Literal, TypedDict


class AmaRatioHint(TypedDict):
    """Aspect ratio hint for image placeholders."""

    x: float
    y: float


class AmaMaxSize(TypedDict):
    """Upper bound for delivered image dimensions."""

    width: int
    height: int


class AmaImageConfig(TypedDict, total=False):
    """Image delivery options."""

    optimizeFormat: Literal["webp", "none"]
    optimizeLoad: Literal["progressive", "none"]
    ratioHint: AmaRatioHint
    maxSize: AmaMaxSize


class AmaFileConfig(TypedDict, total=False):
    """File delivery options."""

    # MIME type, e.g. "application/pdf"
    contentType: str


class AmaComponentConfig(TypedDict, total=False):
    """Rendering options for embedded HTML components."""

    sanitize: bool
    allowedTags: list[str]
    # seconds
    cacheDuration: float


# The marker keys are read from source; runtime name mangling of the
# double-underscore annotations does not affect them.
class AmaImageStructure[C](TypedDict):
    __amatype: Literal["AmaImageDef"]
    __config: C


class AmaFileStructure[C](TypedDict):
    __amatype: Literal["AmaFileDef"]
    __config: C


class AmaComponentStructure[C](TypedDict):
    __amatype: Literal["AmaComponentDef"]
    __config: C


class AmaContentRef[P: str, D](TypedDict):
    """Reference to a JSON content document stored at path ``P``."""

    path: P
    structure: D
    type: Literal["content"]


class AmaImageRef[P: str, C: AmaImageConfig](TypedDict):
    """Reference to an image resource stored at path ``P``."""

    path: P
    structure: AmaImageStructure[C]
    type: Literal["image"]


class AmaFileRef[P: str, C: AmaFileConfig](TypedDict):
    """Reference to a file resource stored at path ``P``."""

    path: P
    structure: AmaFileStructure[C]
    type: Literal["file"]


class AmaComponentRef[P: str, C: AmaComponentConfig](TypedDict):
    """Reference to an HTML component stored at path ``P``."""

    path: P
    structure: AmaComponentStructure[C]
    type: Literal["component"]
