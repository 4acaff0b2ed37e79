"""Markdown and template rendering."""

import logging
from pathlib import PurePosixPath
from typing import Optional

import jinja2
import mistune
from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from .content import TemplateSource
from .errors import TemplateError
from .minifier import MinificationLevel, minify_string


def create_markdown_parser():
    """Create a Mistune markdown parser. Raw HTML in content is passed through."""
    return mistune.create_markdown(
        renderer=mistune.HTMLRenderer(escape=False),
        plugins=['table', 'task_lists', 'strikethrough', 'footnotes']
    )


def template_id(path):
    """Normalize a template path from a config or header into a loader name."""
    return PurePosixPath(str(path).replace('\\', '/')).as_posix().lstrip('/')


class ContentRenderer:
    """Renders templates found below the source directory with Jinja2."""

    def __init__(self, source_dir, template_ext='html', target_ext='html', level=MinificationLevel.DISABLED):
        self.source_dir = source_dir
        self.template_ext = template_ext
        self.target_ext = target_ext
        self.level = level
        self.logger = logging.getLogger('Renatic.Renderer')

        self.env = Environment(
            loader=FileSystemLoader(str(source_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

        template_count = len(self.env.list_templates(extensions=[template_ext]))
        self.logger.info(f"Loaded {template_count} template files")

    def render(self, template_path, source: Optional[TemplateSource] = None) -> str:
        """
        Render a template with the context of a template source.

        Args:
            template_path: Template path relative to the source directory.
            source: Object with a ``to_context()`` method, or None for an
                empty context.

        Returns:
            The rendered (and minified) text.

        Raises:
            TemplateError: If the template is unknown or fails to render.
        """
        name = template_id(template_path)
        context = source.to_context() if source is not None else {}
        try:
            template = self.env.get_template(name)
            rendered = template.render(**context)
        except TemplateNotFound as e:
            if e.name == name:
                message = f"Template '{name}' not found in '{self.source_dir}'"
            else:
                message = f"Template '{e.name}' used by '{name}' not found in '{self.source_dir}'"
            raise TemplateError(message, stage='render') from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render template '{name}': {e}", stage='render') from e

        return minify_string(rendered, self.level, self.target_ext)
