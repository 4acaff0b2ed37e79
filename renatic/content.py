"""Content entries and the collection binding handed to templates."""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Protocol, Tuple

from .errors import ContentFormatError, IoError, MetadataError
from .location import Location
from .meta import Metadata

HEADER_DELIMITER = '---'

logger = logging.getLogger('Renatic.Content')


class TemplateSource(Protocol):
    """Anything that can be turned into a template context."""

    def to_context(self) -> dict:
        ...


@dataclass(frozen=True)
class RssInfo:
    path: str
    route: str

    @classmethod
    def from_path(cls, rss_path):
        path = PurePosixPath(str(rss_path).replace('\\', '/')).as_posix().lstrip('/')
        return cls(path=path, route='/' + path)

    def to_context(self):
        return {'path': self.path, 'route': self.route}


@dataclass(frozen=True)
class CollectionBinding:
    """Sorted entries of a collection and its feed, as seen by index templates."""

    entries: Tuple['Entry', ...]
    rss: Optional[RssInfo] = None

    def to_context(self):
        return {
            'entries': [entry.to_context() for entry in self.entries],
            'rss': self.rss.to_context() if self.rss else None,
        }


@dataclass(frozen=True)
class Entry:
    """One loaded content file."""

    metadata: Metadata
    location: Location
    content: str
    collection: Optional[CollectionBinding] = None

    def to_context(self):
        return {
            'meta': self.metadata.to_mapping(),
            'location': self.location.to_context(),
            'content': self.content,
            'collection': self.collection.to_context() if self.collection else None,
        }


def split_front_matter(text):
    """
    Split a content file into its header block and body.

    The file must consist of exactly three segments separated by the header
    delimiter: a preamble (ignored), the header and the body.

    Raises:
        ContentFormatError: If the delimiter does not occur exactly twice.
    """
    parts = text.split(HEADER_DELIMITER)
    if len(parts) != 3:
        raise ContentFormatError(
            f"Expected a header enclosed by two '{HEADER_DELIMITER}' lines, "
            f"found {len(parts) - 1} delimiter(s)"
        )
    return parts[1], parts[2]


def load_entry(location, markdown, collection=None):
    """
    Load a content file into an Entry.

    Args:
        location: Location of the content file.
        markdown: Callable converting a markdown body to HTML.
        collection: Binding to attach, for collection index pages.

    Returns:
        The loaded Entry.
    """
    path = location.source_path
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (IOError, OSError) as e:
        raise IoError(f"Failed to read content file '{path}': {e}", stage='load') from e
    except UnicodeDecodeError as e:
        raise ContentFormatError(f"Content file '{path}' is not valid UTF-8", stage='load') from e

    try:
        header, body = split_front_matter(text)
        metadata = Metadata.from_str(header)
    except MetadataError as e:
        raise e.wrap(f"Invalid metadata in content file '{path}'", stage='load') from e
    except ContentFormatError as e:
        raise e.wrap(f"Invalid content file '{path}'", stage='load') from e

    logger.debug(f"Loaded content of '{location.source_child_path}'")
    return Entry(
        metadata=metadata,
        location=location,
        content=markdown(body),
        collection=collection,
    )
