"""Generation of a collection: its entry pages, index, connections and feed."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePath

from .content import CollectionBinding, RssInfo, load_entry
from .errors import ConfigError, IoError, MissingFieldError, PathError, RenaticError, TemplateError
from .index import COLLECTION_CONFIG_FILE
from .location import resolve
from .rss import build_feed, feed_to_xml
from .settings import RenaticSettings

# Stem of the content file rendered as the collection's landing page
INDEX_SOURCE_STEM = 'index'
INDEX_TARGET_STEM = 'index'


@dataclass(frozen=True)
class GeneratedFile:
    """Output of a collection, written by the orchestrator."""
    path: Path
    text: str
    source: str


def sort_entries(entries, logger=None):
    """
    Sort entries by date, newest first.

    Entries without a date are reported and placed last, in their original
    order.
    """
    logger = logger or logging.getLogger('Renatic.Collection')
    dated = [entry for entry in entries if entry.metadata.date is not None]
    undated = [entry for entry in entries if entry.metadata.date is None]
    for entry in undated:
        logger.warning(
            f"The entry '{entry.location.source_child_path}' has no date and is sorted last. "
            f"This can cause issues with templates and RSS feed generation."
        )
    dated.sort(key=lambda entry: entry.metadata.date, reverse=True)
    return dated + undated


def _inside(path, root, what):
    """Normalize ``path`` and make sure it stays below ``root``."""
    normalized = Path(os.path.normpath(path))
    try:
        normalized.relative_to(root)
    except ValueError as e:
        raise PathError(f"{what} '{path}' escapes '{root}'", stage='collection') from e
    return normalized


class CollectionResolver:
    """Turns one collection directory into the files it generates."""

    def __init__(self, context):
        self.context = context
        self.logger = logging.getLogger('Renatic.Collection')

    def resolve(self, collection_dir):
        """
        Generate every output of a collection in memory.

        Nothing is written here, so a collection that fails part way
        produces no output at all.

        Args:
            collection_dir: Path of the collection directory.

        Returns:
            List of GeneratedFile, in generation order.
        """
        collection_dir = Path(collection_dir)
        collection_cfg = self.load_config(collection_dir)

        paths = self.content_files(collection_dir)
        entries = sort_entries(self.load_entries(paths), self.logger)
        self.logger.debug(f"Loaded {len(entries)} entries from '{collection_dir}'")

        outputs = []

        if collection_cfg.template:
            for entry in entries:
                outputs.append(self.render_entry(collection_cfg.template, entry))

        rss_info = RssInfo.from_path(collection_cfg.rss) if collection_cfg.rss else None
        binding = CollectionBinding(entries=tuple(entries), rss=rss_info)

        index_output = self.render_index(paths, binding)
        if index_output:
            outputs.append(index_output)

        for connection in collection_cfg.connections:
            outputs.append(self.render_connection(connection, binding))

        if rss_info:
            outputs.append(self.render_feed(entries, rss_info, collection_cfg))

        self.check_unique(outputs)
        return outputs

    def load_config(self, collection_dir):
        config_path = collection_dir / COLLECTION_CONFIG_FILE
        try:
            return RenaticSettings.load_collection_config(config_path)
        except ConfigError as e:
            raise e.wrap(f"Failed to load collection configuration from '{config_path}'", stage='collection') from e

    def content_files(self, collection_dir):
        """Content files directly inside the collection, the index included."""
        content_ext = self.context.config.content_ext
        try:
            paths = sorted(collection_dir.iterdir())
        except OSError as e:
            raise IoError(f"Failed to read collection directory '{collection_dir}': {e}", stage='collection') from e
        return [path for path in paths if path.is_file() and path.suffix[1:].lower() == content_ext]

    def load_entries(self, paths):
        ctx = self.context
        entries = []
        for path in paths:
            if path.stem == INDEX_SOURCE_STEM:
                continue
            try:
                location = resolve(path, ctx.source_dir, ctx.output_dir, ctx.config.target_ext)
                entries.append(load_entry(location, ctx.markdown))
            except RenaticError as e:
                raise e.wrap(f"Failed to load content item '{path}'", stage='collection') from e
        return entries

    def render_entry(self, template, entry):
        try:
            text = self.context.renderer.render(template, entry)
        except TemplateError as e:
            raise e.wrap(
                f"Failed to generate content for '{entry.location.source_child_path}' using template '{template}'",
                stage='collection',
            ) from e
        return GeneratedFile(entry.location.target_path, text, str(entry.location.source_child_path))

    def render_index(self, paths, binding):
        """Render the collection's index content file, if there is one."""
        ctx = self.context
        index_paths = [path for path in paths if path.stem == INDEX_SOURCE_STEM]
        if not index_paths:
            return None
        index_path = index_paths[0]

        location = resolve(index_path, ctx.source_dir, ctx.output_dir, ctx.config.target_ext,
                           custom_stem=INDEX_TARGET_STEM)
        try:
            entry = load_entry(location, ctx.markdown, collection=binding)
        except RenaticError as e:
            raise e.wrap(f"Failed to load collection index '{index_path}'", stage='collection') from e
        if entry.metadata.template is None:
            raise MissingFieldError(
                f"Unspecified required template option for '{location.source_child_path}'",
                stage='collection',
            )
        return self.render_entry(entry.metadata.template, entry)

    def render_connection(self, connection, binding):
        """Render a connection template with the collection binding as its context."""
        ctx = self.context
        template_path = _inside(ctx.source_dir / connection, ctx.source_dir, 'Connection')
        location = resolve(template_path, ctx.source_dir, ctx.output_dir, ctx.config.target_ext)
        template = PurePath(location.source_child_path).as_posix()
        try:
            text = ctx.renderer.render(template, binding)
        except TemplateError as e:
            raise e.wrap(f"Failed to generate connection '{connection}'", stage='collection') from e
        self.logger.debug(f"Generated connection '{connection}'")
        return GeneratedFile(location.target_path, text, connection)

    def render_feed(self, entries, rss_info, collection_cfg):
        ctx = self.context
        rss_out = _inside(ctx.output_dir / rss_info.path, ctx.output_dir, 'RSS path')
        self.logger.debug(f"Generating RSS feed '{rss_info.path}'")
        feed = build_feed(entries, rss_info.path, ctx.config, collection_cfg)
        return GeneratedFile(rss_out, feed_to_xml(feed), rss_info.path)

    def check_unique(self, outputs):
        """Two outputs of one collection must never share a target."""
        seen = {}
        for output in outputs:
            if output.path in seen:
                raise PathError(
                    f"'{output.source}' and '{seen[output.path]}' both generate '{output.path}'",
                    stage='collection',
                )
            seen[output.path] = output.source
