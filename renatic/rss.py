"""RSS 2.0 feed of a collection."""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from email.utils import format_datetime
from typing import List

ATOM_NAMESPACE = 'http://www.w3.org/2005/Atom'
GENERATOR = 'renatic'
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Time of day given to entry dates in the feed
PUBLISH_TIME = time(12, 0, 0)
# pubDate of entries without a date
MISSING_DATE = datetime(1970, 1, 1, tzinfo=timezone.utc)

logger = logging.getLogger('Renatic.Rss')


@dataclass
class RssGuid:
    value: str
    is_permalink: bool


@dataclass
class RssItem:
    title: str
    link: str
    description: str
    guid: RssGuid
    pub_date: datetime


@dataclass
class RssChannel:
    title: str
    link: str
    description: str
    items: List[RssItem] = field(default_factory=list)
    last_build_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    generator: str = GENERATOR


@dataclass
class RssFeed:
    channel: RssChannel
    version: str = '2.0'


def join_url(base, path):
    base = base.rstrip('/')
    path = path.lstrip('/')
    if not path:
        return base
    return f"{base}/{path}"


def entry_link(entry, base_url, has_pages):
    """Link of an entry: its own page when the collection renders pages, else an anchor."""
    if has_pages:
        return base_url.rstrip('/') + entry.location.short_route
    return base_url + '#' + entry.location.target_file_stem


def entry_pub_date(entry):
    if entry.metadata.date is None:
        logger.warning(
            f"The entry '{entry.metadata.title}' has no date! "
            f"This can cause issues with templates and RSS feed generation."
        )
        return MISSING_DATE
    return datetime.combine(entry.metadata.date, PUBLISH_TIME, tzinfo=timezone.utc)


def build_feed(entries, rss_path, config, collection_config):
    """
    Build the RSS document of a collection.

    Args:
        entries: Collection entries, already sorted.
        rss_path: Output path of the feed, relative to the output root.
        config: Site configuration (for ``base_url``).
        collection_config: Configuration of the collection.

    Returns:
        RssFeed with one item per entry, in the given order.
    """
    has_pages = collection_config.template is not None
    items = []
    for entry in entries:
        link = entry_link(entry, config.base_url, has_pages)
        items.append(RssItem(
            title=entry.metadata.title,
            link=link,
            description=entry.content,
            guid=RssGuid(value=link, is_permalink=has_pages),
            pub_date=entry_pub_date(entry),
        ))

    channel = RssChannel(
        title=collection_config.title,
        link=join_url(config.base_url, str(rss_path)),
        description=collection_config.description,
        items=items,
    )
    return RssFeed(channel=channel)


def _text_element(parent, tag, text):
    element = ET.SubElement(parent, tag)
    element.text = text
    return element


def feed_to_xml(feed):
    """Serialize an RssFeed to an XML string."""
    ET.register_namespace('atom', ATOM_NAMESPACE)
    rss = ET.Element('rss', {'version': feed.version})
    channel = ET.SubElement(rss, 'channel')
    _text_element(channel, 'title', feed.channel.title)
    _text_element(channel, 'link', feed.channel.link)
    ET.SubElement(channel, f'{{{ATOM_NAMESPACE}}}link', {
        'href': feed.channel.link,
        'rel': 'self',
        'type': 'application/rss+xml',
    })
    _text_element(channel, 'description', feed.channel.description)
    _text_element(channel, 'lastBuildDate', format_datetime(feed.channel.last_build_date))
    _text_element(channel, 'generator', feed.channel.generator)

    for item in feed.channel.items:
        item_element = ET.SubElement(channel, 'item')
        _text_element(item_element, 'title', item.title)
        _text_element(item_element, 'link', item.link)
        _text_element(item_element, 'description', item.description)
        guid = _text_element(item_element, 'guid', item.guid.value)
        guid.set('isPermaLink', 'true' if item.guid.is_permalink else 'false')
        _text_element(item_element, 'pubDate', format_datetime(item.pub_date))

    ET.indent(rss, space='  ')
    return XML_DECLARATION + ET.tostring(rss, encoding='unicode') + '\n'
