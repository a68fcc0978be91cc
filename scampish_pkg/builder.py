"""
Builds the in-memory site tree by walking the content store.
"""

import logging

from .concurrency import gather_all
from .content import FileKind, classify, parse_config, parse_front_matter
from .state import DirectoryState, FileState
from .store import ContentStore
from .urls import ensure_prefix, output_name, path_to_filename, url_join


class SiteBuilder:
    """
    Recursively turns a content prefix into a DirectoryState tree.

    Files and subdirectories of a directory are processed concurrently. Any
    store or parse error aborts the whole build.
    """

    def __init__(self, store: ContentStore, source_dir='src', base_url='/'):
        self.store = store
        self.source_dir = ensure_prefix(source_dir)
        self.base_url = base_url
        self.logger = logging.getLogger('Scampish.builder')

    async def build(self):
        """Build the tree for the whole content root."""
        self.logger.info(f"Building site tree from {self.store.in_bucket}/{self.source_dir}")
        root = await self.build_directory(self.source_dir)
        root.base_url = self.base_url
        return root

    async def build_directory(self, prefix, parent=None):
        prefix = ensure_prefix(prefix)
        listing = await self.store.list(prefix)
        self.logger.debug(f"In directory: {prefix}")

        relative_path = prefix[len(self.source_dir):].strip('/')
        dir_state = DirectoryState(
            prefix=prefix,
            relative_path=relative_path,
            url=url_join(self.base_url, relative_path),
            parent=parent,
        )

        await gather_all([
            self._process_files(dir_state, listing.files),
            self._process_subdirs(dir_state, listing.directories),
        ])

        dir_state.finalize()
        return dir_state

    async def _process_files(self, dir_state, keys):
        await gather_all(self.process_file(dir_state, key) for key in keys)

    async def _process_subdirs(self, dir_state, prefixes):
        subdirs = await gather_all(self.build_directory(p, dir_state) for p in prefixes)
        dir_state.subdirs.extend(subdirs)

    async def process_file(self, dir_state, key):
        """
        Classify one listing entry and fold it into its directory.

        Returns the new FileState, or None for configuration and hidden files.
        """
        filename = path_to_filename(key)
        kind = classify(filename)

        if kind is FileKind.CONFIG:
            self.logger.debug(f"Parsing {key}")
            dir_state.merge_config(parse_config(await self.store.get(key), key))
            return None

        if kind is FileKind.IGNORED:
            self.logger.debug(f"Skipping {key}")
            return None

        if kind is FileKind.RAW:
            return dir_state.add_file(FileState(
                key=key,
                filename=filename,
                relative_url=filename,
                url=url_join(dir_state.url, filename),
                raw=True,
            ))

        relative_url = output_name(filename)
        file_state = dir_state.add_file(FileState(
            key=key,
            filename=filename,
            relative_url=relative_url,
            url=url_join(dir_state.url, relative_url),
        ))
        self.logger.debug(f"Reading front matter of {key}")
        front_matter = parse_front_matter(await self.store.get(key), key)
        file_state.apply_front_matter(front_matter.data)
        file_state.content = front_matter.content
        return file_state
