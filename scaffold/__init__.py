"""Scaffold module: turns a configuration into a project on disk."""

from .materializer import ProjectMaterializer, ESSENTIAL_FILES

__all__ = [
    "ProjectMaterializer",
    "ESSENTIAL_FILES",
]
