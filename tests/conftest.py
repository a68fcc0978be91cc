"""Test configuration and fixtures for Scampish tests."""

import asyncio
import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from scampish_pkg.store import MemoryStore

POST_TEMPLATE = """<html>
<head><title>{{ page.title }}</title></head>
<body>
{% include "header" %}
<article>{{ content }}</article>
<ul>
{% for post in page.related_posts %}<li class="{{ 'current' if post.current else 'other' }}">{{ post.url }}</li>
{% endfor %}</ul>
</body>
</html>"""

PAGE_TEMPLATE = """<html>
<head><title>{{ page.title }} - {{ site.title }}</title></head>
<body>{% include "header" %}<main>{{ content }}</main></body>
</html>"""

HEADER_TEMPLATE = """<header>{{ site.title }}{% for dir in site.subdirs %} <a href="{{ dir.url }}">{{ dir.section }}</a>{% endfor %}</header>"""

# Minimal PNG image (1x1 pixel)
PNG_DATA = b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde\x00\x00\x00\tpHYs\x00\x00\x0b\x13\x00\x00\x0b\x13\x01\x00\x9a\x9c\x18\x00\x00\x00\nIDATx\x9cc\xf8\x00\x00\x00\x01\x00\x01\x00\x00\x00\x00IEND\xaeB`\x82'


@pytest.fixture(autouse=True)
def reset_scampish_logger():
    """Drop handlers added by setup_logging so every test configures its own."""
    yield
    logger = logging.getLogger('Scampish')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def template_objects():
    return {
        'templates/post.html': POST_TEMPLATE,
        'templates/page.html': PAGE_TEMPLATE,
        'templates/header.html': HEADER_TEMPLATE,
    }


@pytest.fixture
def content_objects():
    """A small site with a root page, two sections and a raw asset."""
    return {
        'scampish_config.yaml': "buckets:\n  test: out-bucket\n  prod: www-bucket\n",
        'src/_config.yaml': "title: My Site\nauthor: Site Author\n",
        'src/index.markdown': "---\ntitle: Home\nlayout: page\n---\n# Welcome\n",
        'src/robots.txt': "User-agent: *\n",
        'src/blog/_config.yaml': "order: 2\nsection: Blog\n",
        'src/blog/_draft.markdown': "---\ntitle: Draft\n---\nNot yet\n",
        'src/blog/first.markdown': "---\ntitle: First\norder: 1\n---\nFirst body\n",
        'src/blog/second.markdown': "---\ntitle: Second\n---\nSecond body\n",
        'src/blog/images/cat.png': PNG_DATA,
        'src/about/_config.yaml': "order: 1\nsection: About\nauthor: Team\n",
        'src/about/team.markdown': "---\ntitle: Team\nlayout: page\n---\nWho we are\n",
    }


@pytest.fixture
def memory_store(content_objects, template_objects):
    objects = dict(content_objects)
    objects.update(template_objects)
    return MemoryStore(objects, in_bucket='content-bucket')


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never looks for real ones."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
