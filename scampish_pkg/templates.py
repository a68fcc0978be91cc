"""
Template loading and rendering.

Templates live in the content bucket under a fixed prefix and are fetched the
first time a page needs one. Every concurrent caller waits on the same load,
so the prefix is listed exactly once per run.
"""

import asyncio
import enum
import logging

from jinja2 import DictLoader, Environment, TemplateNotFound, TemplateSyntaxError

from .concurrency import gather_all
from .errors import StoreError
from .store import ContentStore
from .urls import ensure_prefix, path_to_filename, split_extension

DEFAULT_TEMPLATE = 'post'


class TemplateState(enum.Enum):
    UNLOADED = 'unloaded'
    LOADING = 'loading'
    LOADED = 'loaded'


def template_name(key):
    """'templates/post.html' -> 'post'."""
    base, _ = split_extension(path_to_filename(key))
    return base


class TemplateRenderer:
    def __init__(self, store: ContentStore, prefix='templates/'):
        self.store = store
        self.prefix = ensure_prefix(prefix)
        self.templates = {}
        self.state = TemplateState.UNLOADED
        self.env = None
        self._load_task = None
        self.logger = logging.getLogger('Scampish.templates')

    @property
    def loaded(self):
        return self.state is TemplateState.LOADED

    async def load(self):
        """Load every template once; later and concurrent calls share that load."""
        if self.loaded:
            return self.templates

        if self._load_task is None:
            self.state = TemplateState.LOADING
            self._load_task = asyncio.ensure_future(self._load())
        # A cancelled caller must not cancel the load other callers wait on.
        return await asyncio.shield(self._load_task)

    async def _load(self):
        self.logger.debug(f"Loading templates from {self.prefix}")
        listing = await self.store.list(self.prefix)
        await gather_all(self._fetch(key) for key in listing.files)

        self.env = Environment(loader=DictLoader(self.templates))
        self.state = TemplateState.LOADED
        self.logger.info(f"Loaded {len(self.templates)} templates")
        return self.templates

    async def _fetch(self, key):
        name = template_name(key)
        if not name:
            return

        try:
            body = await self.store.get(key)
            text = body.decode('utf-8')
        except (StoreError, UnicodeDecodeError) as e:
            # Pages using this template fail later with TemplateNotFound.
            self.logger.error(f"Failed to get template {key}: {e}")
            return

        self.templates[name] = text

    async def render(self, name, context):
        """Render template ``name`` with ``context``, loading templates first if needed."""
        await self.load()
        return self.render_loaded(name, context)

    def render_loaded(self, name, context):
        """
        Render without suspending; only valid once templates are loaded.

        Raises:
            TemplateNotFound: If no template called ``name`` was loaded
        """
        if not self.loaded:
            raise RuntimeError("Templates have not been loaded")

        try:
            template = self.env.get_template(name)
            return template.render(context)
        except (TemplateNotFound, TemplateSyntaxError) as e:
            self.logger.error(f"Template error for {name}: {e}")
            raise
