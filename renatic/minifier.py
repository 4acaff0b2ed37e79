"""Minification of rendered pages and text assets."""

import logging
from enum import Enum

import csscompressor
import minify_html
import rjsmin

from .location import normalize_ext

logger = logging.getLogger('Renatic.Minifier')

HTML_EXTS = {'html', 'htm'}


class MinificationLevel(Enum):
    DISABLED = 'disabled'
    SPEC_COMPLIANT = 'spec-compliant'
    MAXIMAL = 'maximal'

    @classmethod
    def from_name(cls, name):
        """Look up a level by its command-line name."""
        for level in cls:
            if level.value == name:
                return level
        raise ValueError(f"Unknown minification level '{name}'")


def minify_string(text, level, ext='html'):
    """Minify ``text`` according to its file extension.

    Extensions without a minifier are returned unchanged.
    """
    if level is MinificationLevel.DISABLED:
        return text

    ext = normalize_ext(ext).lower()
    keep_safe = level is MinificationLevel.SPEC_COMPLIANT

    if ext in HTML_EXTS:
        return minify_html.minify(
            text,
            minify_css=True,
            minify_js=True,
            keep_closing_tags=keep_safe,
            keep_html_and_head_opening_tags=keep_safe,
        )
    if ext == 'css':
        return csscompressor.compress(text, preserve_exclamation_comments=keep_safe)
    if ext == 'js':
        return rjsmin.jsmin(text, keep_bang_comments=keep_safe)

    logger.debug(f"No minifier for '.{ext}' files, leaving content unchanged")
    return text
