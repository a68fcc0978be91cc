"""
Render pipeline: walks a built site tree, renders every page and publishes
the results.

Rendering and publishing are separate steps. Every page of the tree is
rendered first and the resulting writes are queued; the queue is only
flushed to the output bucket once the whole tree rendered without error.
"""

import logging
from collections import namedtuple

from .concurrency import gather_all
from .content import create_markdown_parser
from .store import HTML_CONTENT_TYPE, PAGE_CACHE_CONTROL, PUBLIC_READ, ContentStore
from .templates import DEFAULT_TEMPLATE
from .urls import output_key, url_join


class PendingCopy(namedtuple('PendingCopy', ['source_key', 'dest_key'])):
    """A raw asset copied verbatim from the content bucket."""

    async def publish(self, store):
        await store.copy(self.source_key, self.dest_key, acl=PUBLIC_READ)


class PendingUpload(namedtuple('PendingUpload', ['dest_key', 'body'])):
    """A rendered HTML page."""

    async def publish(self, store):
        await store.put(
            self.dest_key,
            self.body,
            HTML_CONTENT_TYPE,
            acl=PUBLIC_READ,
            cache_control=PAGE_CACHE_CONTROL,
        )


def output_path(dir_state, file_state):
    """Output key of a file: its directory's relative path plus its output name."""
    return output_key(url_join(dir_state.relative_path, file_state.relative_url))


def page_layout(dir_state, file_state):
    """Template of a page: its own layout, else the one its directories configure."""
    return file_state.layout or dir_state.settings.get('layout') or DEFAULT_TEMPLATE


def mark_current(file_state):
    """Flag the page being rendered among its related posts."""
    for post in file_state.related_posts:
        post.current = post.url == file_state.url


class SiteRenderer:
    def __init__(self, store: ContentStore, templates, markdown_parser=None):
        self.store = store
        self.templates = templates
        self.markdown_parser = markdown_parser or create_markdown_parser()
        self.pending = []
        self.pages_rendered = 0
        self.assets_copied = 0
        self.logger = logging.getLogger('Scampish.render')

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text or '')

    async def render(self, site):
        """Render the whole tree rooted at ``site``, then publish it."""
        self.pending = []
        await self.render_directory(site, site)
        await self.publish()

    async def render_directory(self, site, dir_state):
        self.logger.debug(f"Rendering dir: {dir_state.relative_path or '/'}")
        await gather_all([
            self._render_files(site, dir_state),
            self._render_subdirs(site, dir_state),
        ])

    async def _render_files(self, site, dir_state):
        await gather_all(self.render_file(site, dir_state, f) for f in dir_state.files)

    async def _render_subdirs(self, site, dir_state):
        await gather_all(self.render_directory(site, d) for d in dir_state.subdirs)

    async def render_file(self, site, dir_state, file_state):
        dest_key = output_path(dir_state, file_state)

        if file_state.raw:
            self.logger.debug(f"Queueing copy of {file_state.key} to {dest_key}")
            self.pending.append(PendingCopy(file_state.key, dest_key))
            self.assets_copied += 1
            return

        self.logger.debug(f"Rendering file {file_state.key}")
        content_html = self.markdown_filter(file_state.content)

        # Root-level pages carry no related posts.
        file_state.related_posts = [] if dir_state.is_root else dir_state.posts

        await self.templates.load()

        # Sibling pages share the same related post objects: flag and render
        # without suspending so no other page can re-flag them in between.
        mark_current(file_state)
        template = page_layout(dir_state, file_state)
        html = self.templates.render_loaded(template, {
            'content': content_html,
            'site': site,
            'page': file_state,
        })

        self.pending.append(PendingUpload(dest_key, html.encode('utf-8')))
        self.pages_rendered += 1

    async def publish(self):
        """Write every queued object to the output bucket."""
        self.logger.info(f"Publishing {len(self.pending)} objects to {self.store.out_bucket}")
        await gather_all(item.publish(self.store) for item in self.pending)
