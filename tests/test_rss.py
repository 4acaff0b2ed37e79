"""Tests for RSS feed generation."""

import os
import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone
from pathlib import PurePosixPath

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from renatic.content import Entry
from renatic.location import resolve
from renatic.meta import Metadata
from renatic.rss import ATOM_NAMESPACE, MISSING_DATE, build_feed, feed_to_xml, join_url
from renatic.settings import CollectionConfig, Config


def make_entry(name, title, entry_date=None, content='<p>Body</p>\n'):
    location = resolve(PurePosixPath(f'/src/blog/{name}.md'), PurePosixPath('/src'), PurePosixPath('/out'), 'html')
    return Entry(metadata=Metadata(title=title, date=entry_date), location=location, content=content)


CONFIG = Config(base_url='https://example.com')


class TestBuildFeed:
    """Test cases for build_feed."""

    def test_items_with_pages(self):
        """Test links point at entry pages when the collection has a template."""
        collection = CollectionConfig(title='Blog', description='Posts', template='templates/post.html')
        entries = [make_entry('b', 'B', date(2024, 3, 1)), make_entry('a', 'A', date(2024, 1, 1))]

        feed = build_feed(entries, 'blog/rss.xml', CONFIG, collection)

        assert feed.version == '2.0'
        assert feed.channel.title == 'Blog'
        assert feed.channel.description == 'Posts'
        assert feed.channel.link == 'https://example.com/blog/rss.xml'
        assert feed.channel.generator == 'renatic'
        assert [item.title for item in feed.channel.items] == ['B', 'A']
        item = feed.channel.items[0]
        assert item.link == 'https://example.com/blog/b'
        assert item.guid.value == item.link
        assert item.guid.is_permalink is True
        assert item.description == '<p>Body</p>\n'
        assert item.pub_date == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_items_without_pages(self):
        """Test links are anchors when entries have no pages of their own."""
        collection = CollectionConfig(title='Notes')
        entries = [make_entry('a', 'A', date(2024, 1, 1))]

        feed = build_feed(entries, 'rss.xml', CONFIG, collection)

        item = feed.channel.items[0]
        assert item.link == 'https://example.com#a'
        assert item.guid.is_permalink is False

    def test_undated_entry(self, caplog):
        feed = build_feed([make_entry('a', 'A')], 'rss.xml', CONFIG, CollectionConfig())

        assert feed.channel.items[0].pub_date == MISSING_DATE
        assert "has no date" in caplog.text

    def test_empty_collection(self):
        feed = build_feed([], 'rss.xml', CONFIG, CollectionConfig(title='Empty'))

        assert feed.channel.items == []

    def test_base_url_trailing_slash(self):
        config = Config(base_url='https://example.com/')
        collection = CollectionConfig(template='templates/post.html')

        feed = build_feed([make_entry('a', 'A', date(2024, 1, 1))], '/rss.xml', config, collection)

        assert feed.channel.link == 'https://example.com/rss.xml'
        assert feed.channel.items[0].link == 'https://example.com/blog/a'


class TestFeedToXml:
    """Test cases for feed_to_xml."""

    def test_document(self):
        collection = CollectionConfig(title='Blog', description='Posts', template='templates/post.html')
        entries = [make_entry('b', 'B', date(2024, 3, 1)), make_entry('a', 'A', date(2024, 1, 1), '<p>A & more</p>')]

        xml = feed_to_xml(build_feed(entries, 'blog/rss.xml', CONFIG, collection))

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        root = ET.fromstring(xml)
        assert root.tag == 'rss'
        assert root.get('version') == '2.0'
        channel = root.find('channel')
        assert channel.findtext('title') == 'Blog'
        assert channel.findtext('link') == 'https://example.com/blog/rss.xml'
        assert channel.findtext('generator') == 'renatic'
        assert channel.findtext('lastBuildDate')
        atom_link = channel.find(f'{{{ATOM_NAMESPACE}}}link')
        assert atom_link.get('rel') == 'self'
        assert atom_link.get('href') == 'https://example.com/blog/rss.xml'

        items = channel.findall('item')
        assert [item.findtext('title') for item in items] == ['B', 'A']
        assert items[0].findtext('pubDate') == 'Fri, 01 Mar 2024 12:00:00 +0000'
        assert items[0].find('guid').get('isPermaLink') == 'true'
        assert items[1].findtext('description') == '<p>A & more</p>'


class TestJoinUrl:
    """Test cases for join_url."""

    def test_join(self):
        assert join_url('https://example.com/', '/feed.xml') == 'https://example.com/feed.xml'

    def test_empty_path(self):
        assert join_url('https://example.com/', '') == 'https://example.com'
