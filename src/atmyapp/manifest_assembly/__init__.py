"""Manifest assembly exports."""

from .manifest_builder import assemble_manifest
from .manifest_models import Manifest

__all__ = ["Manifest", "assemble_manifest"]
