"""Tests for s3sync/utils/s3_uri.py"""

import pytest

from s3sync.utils.s3_uri import S3Location, parse_s3_uri


@pytest.mark.unit
class TestParseS3Uri:
    """Tests for parse_s3_uri."""

    def test_s3_scheme(self):
        assert parse_s3_uri("s3://my-bucket/1/1234/7.jpg") == S3Location("my-bucket", "1/1234/7.jpg", None, False)

    def test_path_style_regional_endpoint(self):
        location = parse_s3_uri("https://s3.eu-west-1.amazonaws.com/my-bucket/1/1234/7.jpg")
        assert location.bucket == "my-bucket"
        assert location.key == "1/1234/7.jpg"
        assert location.region == "eu-west-1"
        assert location.path_style is True

    def test_path_style_legacy_dash_endpoint(self):
        location = parse_s3_uri("http://s3-us-west-2.amazonaws.com/my-bucket/key.txt")
        assert location.bucket == "my-bucket"
        assert location.key == "key.txt"
        assert location.region == "us-west-2"

    def test_path_style_global_endpoint(self):
        location = parse_s3_uri("https://s3.amazonaws.com/my-bucket/key.txt")
        assert location.bucket == "my-bucket"
        assert location.key == "key.txt"
        assert location.region is None

    def test_virtual_hosted_style(self):
        location = parse_s3_uri("https://my-bucket.s3.eu-west-1.amazonaws.com/1/1234/7.jpg")
        assert location.bucket == "my-bucket"
        assert location.key == "1/1234/7.jpg"
        assert location.region == "eu-west-1"
        assert location.path_style is False

    def test_virtual_hosted_style_dotted_bucket(self):
        location = parse_s3_uri("https://files.example.com.s3.amazonaws.com/a/b.png")
        assert location.bucket == "files.example.com"
        assert location.key == "a/b.png"

    @pytest.mark.parametrize(
        "uri,bucket,region,path_style",
        [
            ("https://s3.dualstack.eu-west-1.amazonaws.com/my-bucket/a/b.jpg", "my-bucket", "eu-west-1", True),
            ("https://my-bucket.s3.dualstack.eu-west-1.amazonaws.com/a/b.jpg", "my-bucket", "eu-west-1", False),
            ("https://my-bucket.s3-accelerate.amazonaws.com/a/b.jpg", "my-bucket", None, False),
            ("https://my-bucket.s3-accelerate.dualstack.amazonaws.com/a/b.jpg", "my-bucket", None, False),
            ("https://s3-fips.us-east-1.amazonaws.com/my-bucket/a/b.jpg", "my-bucket", "us-east-1", True),
        ],
    )
    def test_dualstack_accelerate_and_fips_endpoints(self, uri, bucket, region, path_style):
        location = parse_s3_uri(uri)
        assert location == S3Location(bucket, "a/b.jpg", region, path_style)

    def test_custom_endpoint_is_path_style(self):
        location = parse_s3_uri("http://minio.local:9000/my-bucket/10000/12345/9.pdf")
        assert location.bucket == "my-bucket"
        assert location.key == "10000/12345/9.pdf"
        assert location.path_style is True

    def test_key_is_unquoted(self):
        location = parse_s3_uri("https://s3.amazonaws.com/my-bucket/dir/my%20file.txt")
        assert location.key == "dir/my file.txt"

    def test_bucket_without_key(self):
        location = parse_s3_uri("s3://my-bucket")
        assert location.bucket == "my-bucket"
        assert location.key is None

    @pytest.mark.parametrize(
        "uri",
        [
            None,
            "",
            123,
            ["s3://bucket/key"],
            "not a uri",
            "ftp://my-bucket/key",
            "https://",
            "s3:///key-without-bucket",
            "https://s3.amazonaws.com/",
            "https://sqs.us-east-1.amazonaws.com/123/queue",
            "http://[::1",
        ],
    )
    def test_invalid_input_returns_none(self, uri):
        assert parse_s3_uri(uri) is None
