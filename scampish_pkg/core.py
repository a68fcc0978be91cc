import asyncio
import logging
import os
import time
from datetime import datetime

from .builder import SiteBuilder
from .content import parse_config
from .errors import ConfigurationError
from .render import SiteRenderer
from .store import S3Store
from .templates import TemplateRenderer
from .urls import path_to_filename


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        allowed_messages = [
            "Starting site build",
            "Site build completed in",
            "Total pages rendered:",
            "Total assets copied:",
            "Publishing",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(log_dir=None):
    """Set up the 'Scampish' logger; every module logs through a child of it."""
    logger = logging.getLogger('Scampish')
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        # Console handler with filter
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        # File handler for all logs
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('scampish_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

    return logger


class Scampish:
    """
    One site generation run: read the content bucket, build the site tree,
    render every page and publish to the output bucket selected by ``target``.
    """

    def __init__(self, bucket, target, store=None, source_dir='src', base_url='/',
                 templates_prefix='templates/', site_config_key='scampish_config.yaml',
                 endpoint_url=None, log_dir=None):
        if not bucket:
            raise ConfigurationError("No bucket defined.")
        if not target:
            raise ConfigurationError("No type defined.")

        self.bucket = bucket
        self.target = target
        self.site_config_key = site_config_key
        self.logger = setup_logging(log_dir)

        self.store = store if store is not None else S3Store(bucket, endpoint_url=endpoint_url)
        self.templates = TemplateRenderer(self.store, templates_prefix)
        self.builder = SiteBuilder(self.store, source_dir=source_dir, base_url=base_url)
        self.renderer = SiteRenderer(self.store, self.templates)

        self.config = {}
        self.site = None

    @property
    def pages_rendered(self):
        return self.renderer.pages_rendered

    @property
    def assets_copied(self):
        return self.renderer.assets_copied

    async def load_site_config(self):
        """Read the bucket-level site configuration; a missing object means {}."""
        key = self.site_config_key
        prefix = key[:len(key) - len(path_to_filename(key))]
        listing = await self.store.list(prefix)
        if key not in listing.files:
            self.logger.debug(f"No site configuration at {self.bucket}/{key}")
            return {}

        self.logger.debug(f"Loading site configuration {self.bucket}/{key}")
        return parse_config(await self.store.get(key), key)

    def resolve_out_bucket(self, site):
        """
        Pick the output bucket for ``target``.

        The bucket-level site configuration wins; the content root's
        _config.yaml is consulted when it has no entry.
        """
        for config in (self.config, site.config):
            buckets = config.get('buckets')
            if isinstance(buckets, dict) and buckets.get(self.target):
                return buckets[self.target]
        raise ConfigurationError(f"No output bucket configured for type '{self.target}'")

    async def run(self):
        """Build the whole site, then render and publish it."""
        start_time = time.time()
        self.logger.info(f"Starting site build of {self.bucket} for '{self.target}'...")

        self.config = await self.load_site_config()
        self.site = await self.builder.build()
        self.store.out_bucket = self.resolve_out_bucket(self.site)

        await self.renderer.render(self.site)

        total_time = time.time() - start_time
        self.logger.info(f"Site build completed in {total_time:.6f} seconds.")
        self.logger.info(f"Total pages rendered: {self.pages_rendered}")
        self.logger.info(f"Total assets copied: {self.assets_copied}")
        return self.site

    def build(self):
        """Synchronous entry point around run()."""
        return asyncio.run(self.run())
