"""Test configuration and fixtures for Renatic tests."""

import pytest
import tempfile
import shutil
from pathlib import Path
import yaml


def write_file(path, text):
    """Write a text file, creating its parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


def content_file(title, body='Body text.', **fields):
    """Build a content file with a YAML header."""
    header = {'title': title}
    header.update(fields)
    return f"---\n{yaml.safe_dump(header, sort_keys=False)}---\n\n{body}\n"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def output_dir(temp_dir):
    """Output directory next to the source directory (not created)."""
    return Path(temp_dir) / 'public'


@pytest.fixture
def site_dir(temp_dir):
    """Create a source directory with configuration, templates, pages and a blog collection."""
    source = Path(temp_dir) / 'site'

    write_file(source / 'renatic.yaml', yaml.safe_dump({
        'base_url': 'https://example.com',
        'ignore': ['templates/'],
    }))

    write_file(source / 'templates' / 'page.html',
               "<h1>{{ meta.title }}</h1>\n<main>{{ content }}</main>\n<a href=\"{{ location.route }}\">self</a>\n")
    write_file(source / 'templates' / 'post.html',
               "<article><h1>{{ meta.title }}</h1>{{ content }}<p>{{ meta.date }}</p></article>\n")
    write_file(source / 'templates' / 'blog_index.html',
               "<h1>{{ meta.title }}</h1>\n"
               "<ul>\n"
               "{% for entry in collection.entries %}"
               "<li><a href=\"{{ entry.location.short_route }}\">{{ entry.meta.title }}</a></li>\n"
               "{% endfor %}"
               "</ul>\n"
               "{% if collection.rss %}<link href=\"{{ collection.rss.route }}\">{% endif %}\n")

    write_file(source / 'about.md', content_file('About', 'About **me**.', template='templates/page.html'))
    write_file(source / 'contact.html', "<p>Contact</p>\n")
    write_file(source / 'assets' / 'style.css', "body {\n    color: red;\n}\n")
    write_file(source / 'assets' / 'logo.txt', "logo\n")

    blog = source / 'blog'
    write_file(blog / 'config.yaml', yaml.safe_dump({
        'title': 'Blog',
        'description': 'Latest posts',
        'template': 'templates/post.html',
        'connections': ['blog/archive.html'],
        'rss': 'blog/rss.xml',
    }))
    write_file(blog / 'first.md', content_file('First', 'First post.', date='2024-01-01'))
    write_file(blog / 'second.md', content_file('Second', 'Second post.', date='2024-03-15'))
    write_file(blog / 'index.md', content_file('Blog', 'Welcome.', template='templates/blog_index.html'))
    write_file(blog / 'archive.html',
               "{% for entry in entries %}{{ entry.location.stem }};{% endfor %}\n")

    return source
