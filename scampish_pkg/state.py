"""
In-memory site tree built from the content store.

A DirectoryState is created for every directory under the content root and
owns the FileState of every content file inside it. Front matter and
directory configuration are open mappings: templates read them as attributes
(``page.title``, ``site.title``) without a fixed schema.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, List, Optional

# Front matter keys that replace the page's own fields instead of only
# landing in its metadata.
OVERRIDABLE_FIELDS = frozenset({'filename', 'relative_url', 'url', 'order', 'layout'})

logger = logging.getLogger('Scampish.state')


def order_value(value: Any) -> float:
    """Numeric sort weight of an 'order' field; anything unusable counts as 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def sort_by_order(states: list) -> list:
    """Stable ascending sort on 'order'; equal weights keep their relative order."""
    return sorted(states, key=lambda state: order_value(state.order))


@dataclass(eq=False)
class FileState:
    key: str
    filename: str
    relative_url: str
    url: str
    raw: bool = False
    content: Optional[str] = None
    order: Any = 0
    layout: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)
    related_posts: List['FileState'] = field(default_factory=list, repr=False)
    current: bool = False
    directory: Optional['DirectoryState'] = field(default=None, repr=False)

    def __getattr__(self, name):
        # Only reached when regular attribute lookup fails.
        if name.startswith('__'):
            raise AttributeError(name)
        meta = self.__dict__.get('meta') or {}
        if name in meta:
            return meta[name]
        directory = self.__dict__.get('directory')
        if directory is not None:
            settings = directory.settings
            if name in settings:
                return settings[name]
        raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")

    @property
    def is_post(self) -> bool:
        return not self.raw

    def apply_front_matter(self, data: Dict[str, Any]) -> None:
        """Copy front matter onto the page; later keys overwrite earlier values."""
        for name, value in data.items():
            self.meta[name] = value
            if name in OVERRIDABLE_FIELDS:
                setattr(self, name, value)


@dataclass(eq=False)
class DirectoryState:
    prefix: str
    relative_path: str
    url: str
    files: List[FileState] = field(default_factory=list)
    posts: List[FileState] = field(default_factory=list)
    subdirs: List['DirectoryState'] = field(default_factory=list)
    default_post: Optional[FileState] = None
    config: Dict[str, Any] = field(default_factory=dict)
    parent: Optional['DirectoryState'] = field(default=None, repr=False)
    base_url: Optional[str] = None

    def __getattr__(self, name):
        if name.startswith('__'):
            raise AttributeError(name)
        config = self.__dict__.get('config') or {}
        if name in config:
            return config[name]
        raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")

    @property
    def order(self) -> Any:
        return self.config.get('order', 0)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def settings(self) -> Dict[str, Any]:
        """Configuration inherited from every ancestor, overridden by this directory's own."""
        inherited = dict(self.parent.settings) if self.parent is not None else {}
        inherited.update(self.config)
        return inherited

    def merge_config(self, data: Dict[str, Any]) -> None:
        """Shallow merge; keys already present are overwritten."""
        shadowed = sorted(set(data) & STRUCTURAL_NAMES)
        if shadowed:
            # Still stored in config and inherited settings, but attribute
            # lookups keep returning the structural value.
            logger.warning(
                f"Configuration of {self.prefix} sets reserved names {', '.join(shadowed)}; "
                f"templates read them as site.config[...]"
            )
        self.config.update(data)

    def add_file(self, file_state: FileState) -> FileState:
        file_state.directory = self
        self.files.append(file_state)
        return file_state

    def finalize(self) -> None:
        """Order posts and subdirectories once every child has been processed."""
        self.posts = sort_by_order([f for f in self.files if f.is_post])
        self.default_post = self.posts[0] if self.posts else None
        self.subdirs = sort_by_order(self.subdirs)

    def walk(self) -> Iterator['DirectoryState']:
        """This directory followed by every directory beneath it, depth first."""
        yield self
        for subdir in self.subdirs:
            yield from subdir.walk()


# Attribute names a directory's configuration cannot override ('order' is
# read from the configuration on purpose).
STRUCTURAL_NAMES = frozenset(
    {f.name for f in fields(DirectoryState)} | {'is_root', 'settings', 'merge_config',
                                                'add_file', 'finalize', 'walk'}
)
