"""
Content store adapters.

The builder and renderer only talk to the four coroutines below, so any
object store with '/'-delimited listings can back a site:

    list(prefix) -> Listing(files, directories)
    get(key) -> bytes
    copy(source_key, dest_key, acl)
    put(dest_key, body, content_type, acl, cache_control)

Reads come from ``in_bucket``; writes go to ``out_bucket``, which is only
known once the site configuration has been read.
"""

import asyncio
import logging
from collections import defaultdict, namedtuple
from typing import Dict, Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConfigurationError, StoreError
from .urls import ensure_prefix, output_key

Listing = namedtuple('Listing', ['files', 'directories'])
PublishedObject = namedtuple(
    'PublishedObject',
    ['body', 'content_type', 'acl', 'cache_control', 'storage_class'],
)

PUBLIC_READ = 'public-read'
STORAGE_CLASS = 'REDUCED_REDUNDANCY'
HTML_CONTENT_TYPE = 'text/html; charset=UTF-8'
PAGE_CACHE_CONTROL = 'max-age=86400, public'


class ContentStore(Protocol):
    in_bucket: str
    out_bucket: Optional[str]

    async def list(self, prefix: str) -> Listing: ...

    async def get(self, key: str) -> bytes: ...

    async def copy(self, source_key: str, dest_key: str, acl: str = PUBLIC_READ) -> None: ...

    async def put(self, dest_key: str, body: bytes, content_type: str,
                  acl: str = PUBLIC_READ, cache_control: Optional[str] = None) -> None: ...


class S3Store:
    """S3 (or S3-compatible) store; blocking boto3 calls run in worker threads."""

    def __init__(self, in_bucket: str, out_bucket: Optional[str] = None,
                 client=None, endpoint_url: Optional[str] = None):
        self.in_bucket = in_bucket
        self.out_bucket = out_bucket
        if client is None:
            kwargs = {'config': Config(retries={'max_attempts': 3})}
            if endpoint_url:
                kwargs['endpoint_url'] = endpoint_url
            client = boto3.client('s3', **kwargs)
        self.client = client
        self.logger = logging.getLogger('Scampish.store')

    def _require_out_bucket(self) -> str:
        if not self.out_bucket:
            raise ConfigurationError("No output bucket configured for publishing")
        return self.out_bucket

    async def list(self, prefix: str) -> Listing:
        return await asyncio.to_thread(self._list, ensure_prefix(prefix))

    def _list(self, prefix: str) -> Listing:
        files, directories = [], []
        try:
            paginator = self.client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=self.in_bucket, Prefix=prefix, Delimiter='/'):
                files.extend(obj['Key'] for obj in page.get('Contents', []))
                directories.extend(p['Prefix'] for p in page.get('CommonPrefixes', []))
        except (BotoCoreError, ClientError) as e:
            raise StoreError('list', f"{self.in_bucket}/{prefix}", e) from e
        self.logger.debug(f"Listed {prefix}: {len(files)} files, {len(directories)} directories")
        return Listing(files, directories)

    async def get(self, key: str) -> bytes:
        return await asyncio.to_thread(self._get, key)

    def _get(self, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.in_bucket, Key=key)
            return response['Body'].read()
        except (BotoCoreError, ClientError) as e:
            raise StoreError('get', f"{self.in_bucket}/{key}", e) from e

    async def copy(self, source_key: str, dest_key: str, acl: str = PUBLIC_READ) -> None:
        await asyncio.to_thread(self._copy, source_key, output_key(dest_key), acl)

    def _copy(self, source_key: str, dest_key: str, acl: str) -> None:
        out_bucket = self._require_out_bucket()
        self.logger.info(f"Copying static {self.in_bucket}/{source_key} to {out_bucket}/{dest_key}")
        try:
            self.client.copy_object(
                Bucket=out_bucket,
                Key=dest_key,
                CopySource={'Bucket': self.in_bucket, 'Key': source_key},
                ACL=acl,
                StorageClass=STORAGE_CLASS,
            )
        except (BotoCoreError, ClientError) as e:
            raise StoreError('copy', f"{out_bucket}/{dest_key}", e) from e

    async def put(self, dest_key: str, body: bytes, content_type: str,
                  acl: str = PUBLIC_READ, cache_control: Optional[str] = None) -> None:
        await asyncio.to_thread(self._put, output_key(dest_key), body, content_type, acl, cache_control)

    def _put(self, dest_key, body, content_type, acl, cache_control):
        out_bucket = self._require_out_bucket()
        self.logger.info(f"Uploading {out_bucket}/{dest_key}")
        params = {
            'Bucket': out_bucket,
            'Key': dest_key,
            'Body': body,
            'ContentType': content_type,
            'ACL': acl,
            'StorageClass': STORAGE_CLASS,
        }
        if cache_control:
            params['CacheControl'] = cache_control
        try:
            self.client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            raise StoreError('put', f"{out_bucket}/{dest_key}", e) from e


class MemoryStore:
    """
    Dictionary-backed store with S3 listing semantics.

    Published objects are kept per output bucket in ``buckets`` so a run can
    be inspected without touching the network.
    """

    def __init__(self, objects: Optional[Dict[str, bytes]] = None,
                 in_bucket: str = 'memory', out_bucket: Optional[str] = None):
        self.in_bucket = in_bucket
        self.out_bucket = out_bucket
        self.objects = {}
        for key, body in (objects or {}).items():
            self.objects[key] = body.encode('utf-8') if isinstance(body, str) else body
        self.buckets = defaultdict(dict)
        self.list_calls = []

    def _require_out_bucket(self) -> str:
        if not self.out_bucket:
            raise ConfigurationError("No output bucket configured for publishing")
        return self.out_bucket

    @property
    def published(self) -> Dict[str, PublishedObject]:
        """Objects written to the current output bucket."""
        return self.buckets[self.out_bucket]

    async def list(self, prefix: str) -> Listing:
        prefix = ensure_prefix(prefix)
        self.list_calls.append(prefix)
        files, directories = [], []
        for key in sorted(self.objects):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            slash = rest.find('/')
            if slash == -1:
                files.append(key)
            else:
                directory = prefix + rest[:slash + 1]
                if directory not in directories:
                    directories.append(directory)
        return Listing(files, directories)

    async def get(self, key: str) -> bytes:
        try:
            return self.objects[key]
        except KeyError as e:
            raise StoreError('get', f"{self.in_bucket}/{key}", 'NoSuchKey') from e

    async def copy(self, source_key: str, dest_key: str, acl: str = PUBLIC_READ) -> None:
        body = await self.get(source_key)
        bucket = self._require_out_bucket()
        self.buckets[bucket][output_key(dest_key)] = PublishedObject(
            body, None, acl, None, STORAGE_CLASS)

    async def put(self, dest_key: str, body: bytes, content_type: str,
                  acl: str = PUBLIC_READ, cache_control: Optional[str] = None) -> None:
        if isinstance(body, str):
            body = body.encode('utf-8')
        bucket = self._require_out_bucket()
        self.buckets[bucket][output_key(dest_key)] = PublishedObject(
            body, content_type, acl, cache_control, STORAGE_CLASS)
