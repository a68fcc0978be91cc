"""Tests for the S3 content store, against moto's S3 mock."""

import boto3
import pytest
from moto import mock_aws

from scampish_pkg import Scampish
from scampish_pkg.errors import ConfigurationError, StoreError
from scampish_pkg.store import MemoryStore, S3Store

from conftest import PNG_DATA


@pytest.fixture
def s3_client(aws_credentials):
    with mock_aws():
        client = boto3.client('s3', region_name='us-east-1')
        client.create_bucket(Bucket='content-bucket')
        client.create_bucket(Bucket='out-bucket')
        yield client


def put_objects(client, objects, bucket='content-bucket'):
    for key, body in objects.items():
        if isinstance(body, str):
            body = body.encode('utf-8')
        client.put_object(Bucket=bucket, Key=key, Body=body)


class TestS3Store:
    """Test cases for S3Store."""

    def test_list_is_single_level(self, run, s3_client):
        put_objects(s3_client, {
            'src/a.markdown': "A",
            'src/b.png': b"png",
            'src/blog/c.markdown': "C",
            'src/blog/deep/d.markdown': "D",
            'src/news/e.markdown': "E",
        })
        store = S3Store('content-bucket', client=s3_client)

        listing = run(store.list('src'))

        assert listing.files == ['src/a.markdown', 'src/b.png']
        assert listing.directories == ['src/blog/', 'src/news/']

    def test_get(self, run, s3_client):
        put_objects(s3_client, {'src/cat.png': PNG_DATA})
        store = S3Store('content-bucket', client=s3_client)

        assert run(store.get('src/cat.png')) == PNG_DATA

    def test_get_missing_key(self, run, s3_client):
        store = S3Store('content-bucket', client=s3_client)

        with pytest.raises(StoreError, match="content-bucket/src/nope.markdown"):
            run(store.get('src/nope.markdown'))

    def test_copy_to_output_bucket(self, run, s3_client):
        put_objects(s3_client, {'src/blog/images/cat.png': PNG_DATA})
        store = S3Store('content-bucket', out_bucket='out-bucket', client=s3_client)

        run(store.copy('src/blog/images/cat.png', '/blog/images/cat.png'))

        response = s3_client.get_object(Bucket='out-bucket', Key='blog/images/cat.png')
        assert response['Body'].read() == PNG_DATA
        assert response['StorageClass'] == 'REDUCED_REDUNDANCY'

    def test_put_sets_headers(self, run, s3_client):
        store = S3Store('content-bucket', out_bucket='out-bucket', client=s3_client)

        run(store.put('index.html', b"<html/>", 'text/html; charset=UTF-8',
                      cache_control='max-age=86400, public'))

        head = s3_client.head_object(Bucket='out-bucket', Key='index.html')
        assert head['ContentType'] == 'text/html; charset=UTF-8'
        assert head['CacheControl'] == 'max-age=86400, public'

    def test_write_without_output_bucket(self, run, s3_client):
        store = S3Store('content-bucket', client=s3_client)

        with pytest.raises(ConfigurationError):
            run(store.put('index.html', b"", 'text/html'))

    def test_full_run(self, s3_client, template_objects, content_objects):
        put_objects(s3_client, template_objects)
        put_objects(s3_client, content_objects)
        store = S3Store('content-bucket', client=s3_client)

        Scampish('content-bucket', 'test', store=store).build()

        keys = sorted(
            obj['Key'] for obj in s3_client.list_objects_v2(Bucket='out-bucket')['Contents']
        )
        assert keys == [
            'about/team.html',
            'blog/first.html',
            'blog/images/cat.png',
            'blog/second.html',
            'index.html',
            'robots.txt',
        ]


class TestMemoryStore:
    """Test cases for MemoryStore listing semantics."""

    def test_list_matches_s3_layout(self, run):
        store = MemoryStore({
            'src/b.png': b"",
            'src/a.markdown': "A",
            'src/blog/c.markdown': "C",
            'src/blog/deep/d.markdown': "D",
            'other/x': "x",
        })

        listing = run(store.list('src/'))

        assert listing.files == ['src/a.markdown', 'src/b.png']
        assert listing.directories == ['src/blog/']
        assert store.list_calls == ['src/']

    def test_missing_key(self, run):
        with pytest.raises(StoreError, match="NoSuchKey"):
            run(MemoryStore().get('nope'))
