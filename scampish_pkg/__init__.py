"""
Scampish - A static site generator that builds from and publishes to S3.

Scampish walks a tree of Markdown posts, raw assets and per-directory
_config.yaml files in a content bucket, renders every page through Jinja2
templates stored in the same bucket and uploads the result to an output bucket.
"""

__version__ = "1.0.0"

from .core import Scampish
from .errors import ConfigurationError, ScampishError, StoreError

__all__ = ['Scampish', 'ScampishError', 'ConfigurationError', 'StoreError']
