"""
Classification and parsing of individual content objects.
"""

import enum
import re
from collections import namedtuple

import mistune
import yaml

from .errors import ConfigurationError
from .urls import MARKDOWN_EXTENSION

CONFIG_FILENAME = '_config.yaml'
HIDDEN_PREFIX = '_'

FRONT_MATTER_RE = re.compile(
    r'\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)',
    re.DOTALL | re.MULTILINE,
)

FrontMatter = namedtuple('FrontMatter', ['data', 'content'])


class FileKind(enum.Enum):
    CONFIG = 'config'
    IGNORED = 'ignored'
    RAW = 'raw'
    MARKDOWN = 'markdown'


def classify(filename):
    """Decide how a directory entry is handled from its base name alone."""
    if filename == CONFIG_FILENAME:
        return FileKind.CONFIG
    # An empty name is the directory marker object some tools create.
    if not filename or filename.startswith(HIDDEN_PREFIX):
        return FileKind.IGNORED
    if filename.endswith(MARKDOWN_EXTENSION):
        return FileKind.MARKDOWN
    return FileKind.RAW


def _decode(data, source):
    if not isinstance(data, bytes):
        return data
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Invalid UTF-8 in {source}: {e}") from e


def _load_mapping(text, source):
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {source}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping in {source}, got {type(data).__name__}"
        )
    return data


def parse_config(data, key):
    """
    Parse a directory configuration object.

    Args:
        data: Raw bytes (or text) of the configuration object
        key: Store key, used in error messages

    Returns:
        Configuration mapping ({} for an empty file)

    Raises:
        ConfigurationError: If the payload is not UTF-8 or not a YAML mapping
    """
    return _load_mapping(_decode(data, key), key)


def parse_front_matter(text, key=None):
    """
    Split a markdown document into its front matter and body.

    A document without a leading '---' block has empty front matter and is
    returned whole as the body.

    Raises:
        ConfigurationError: If the document is not UTF-8 or its front matter
            block is not a YAML mapping
    """
    text = _decode(text, key or "markdown document")

    match = FRONT_MATTER_RE.match(text)
    if not match:
        return FrontMatter({}, text)

    source = f"front matter of {key}" if key else "front matter"
    data = _load_mapping(match.group(1), source)
    return FrontMatter(data, text[match.end():])


def create_markdown_parser():
    """Create a Mistune markdown parser with a custom renderer."""
    class CustomRenderer(mistune.HTMLRenderer):
        def __init__(self):
            super().__init__(escape=False)

        def block_code(self, code, info=None):
            escaped_code = mistune.escape(code)
            return '<pre style="white-space: pre-wrap;"><code>{}</code></pre>'.format(escaped_code)

    return mistune.create_markdown(
        renderer=CustomRenderer(),
        plugins=['table', 'task_lists', 'strikethrough']
    )
