"""Dynamic pages — template resources and render models."""

from trill.pages.model import DIRECTIVE, page_model, parse_directives
from trill.pages.resources import FileResources, ResourceLoader

__all__ = [
    "DIRECTIVE",
    "FileResources",
    "ResourceLoader",
    "page_model",
    "parse_directives",
]
