"""Poster rendering."""

from .compositor import Compositor
from .preview import PreviewRenderer
from .scene import ElementKind, SceneElement, build_scene

__all__ = ["Compositor", "ElementKind", "PreviewRenderer", "SceneElement", "build_scene"]
