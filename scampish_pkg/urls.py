"""
URL and key helpers shared by the builder and the renderer.
"""

from typing import Tuple

MARKDOWN_EXTENSION = '.markdown'
OUTPUT_EXTENSION = '.html'


def url_join(*parts: str) -> str:
    """
    Join path components with single forward slashes.

    Leading and trailing slashes are stripped from every component and empty
    components are dropped. The result starts with a slash only when the first
    component did.

    Args:
        *parts: Path components

    Returns:
        Joined path
    """
    if not parts:
        return ''

    components = [part.strip('/') for part in parts]
    url = '/'.join(component for component in components if component)
    if parts[0].startswith('/'):
        url = '/' + url
    return url


def path_to_filename(path: str) -> str:
    """Return the last segment of a key ('' for a key ending in '/')."""
    return path[path.rfind('/') + 1:]


def split_extension(filename: str) -> Tuple[str, str]:
    """Split 'post.markdown' into ('post', '.markdown')."""
    dot = filename.rfind('.')
    if dot <= 0:
        return filename, ''
    return filename[:dot], filename[dot:]


def output_name(filename: str) -> str:
    """Name of the published object for a content file."""
    if filename.endswith(MARKDOWN_EXTENSION):
        return filename[:-len(MARKDOWN_EXTENSION)] + OUTPUT_EXTENSION
    return filename


def ensure_prefix(prefix: str) -> str:
    """Directory prefixes always end with a single slash."""
    if prefix and not prefix.endswith('/'):
        prefix += '/'
    return prefix


def output_key(url: str) -> str:
    """Object keys in the output bucket never start with a slash."""
    return url.lstrip('/')
