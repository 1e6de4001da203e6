"""Business logic services."""

from .gallery import GalleryService
from .poster import PosterService, export_filename

__all__ = ["GalleryService", "PosterService", "export_filename"]
