"""
Renatic - A static site generator for content collections.

Renatic walks a source directory, renders Markdown content with YAML front
matter through Jinja2 templates, groups collections of entries (such as blog
posts) for index pages and RSS feeds, and copies everything else to the
output directory.
"""

__version__ = "1.0.0"

from .core import Renatic
from .errors import RenaticError

__all__ = ['Renatic', 'RenaticError']
