"""Tests for s3sync/aws_clients.py"""

from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from s3sync.aws_clients import (
    build_object_url,
    build_rekognition_client,
    build_s3_client,
    get_object_by_uri,
)


@pytest.mark.unit
class TestBuildS3Client:
    """Tests for build_s3_client."""

    @patch("s3sync.aws_clients.boto3.client")
    def test_builds_client_with_timeouts(self, mock_boto_client, aws_config):
        client = build_s3_client(aws_config)

        assert client is mock_boto_client.return_value
        args, kwargs = mock_boto_client.call_args
        assert args == ("s3",)
        assert kwargs["aws_access_key_id"] == aws_config.access_key_id
        assert kwargs["aws_secret_access_key"] == aws_config.secret_access_key
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["use_ssl"] is True
        assert kwargs["endpoint_url"] is None
        assert kwargs["config"].connect_timeout == 2
        assert kwargs["config"].read_timeout == 5

    @patch("s3sync.aws_clients.boto3.client")
    def test_http_scheme_disables_ssl(self, mock_boto_client, aws_config):
        build_s3_client(replace(aws_config, scheme="http", endpoint_url="http://minio.local:9000"))

        kwargs = mock_boto_client.call_args[1]
        assert kwargs["use_ssl"] is False
        assert kwargs["endpoint_url"] == "http://minio.local:9000"

    @pytest.mark.parametrize(
        "changes",
        [
            {"access_key_id": None},
            {"secret_access_key": ""},
            {"region": ""},
            {"scheme": "ftp"},
            {"scheme": None},
        ],
    )
    @patch("s3sync.aws_clients.boto3.client")
    def test_incomplete_config_returns_none(self, mock_boto_client, aws_config, changes):
        assert build_s3_client(replace(aws_config, **changes)) is None
        mock_boto_client.assert_not_called()

    @patch("s3sync.aws_clients.logger")
    @patch("s3sync.aws_clients.boto3.client")
    def test_construction_error_returns_none(self, mock_boto_client, mock_logger, aws_config):
        mock_boto_client.side_effect = ValueError("Invalid endpoint")

        assert build_s3_client(aws_config) is None
        mock_logger.error.assert_called_once()
        assert "Invalid endpoint" in mock_logger.error.call_args[0][0]


@pytest.mark.unit
class TestBuildRekognitionClient:
    """Tests for build_rekognition_client."""

    @patch("s3sync.aws_clients.boto3.client")
    def test_builds_client_with_tls(self, mock_boto_client, aws_config):
        client = build_rekognition_client(aws_config)

        assert client is mock_boto_client.return_value
        args, kwargs = mock_boto_client.call_args
        assert args == ("rekognition",)
        assert kwargs["use_ssl"] is True
        assert kwargs["verify"] is True
        assert kwargs["config"].connect_timeout == 2
        assert kwargs["config"].read_timeout == 10

    @patch("s3sync.aws_clients.boto3.client")
    def test_http_scheme_disables_verification_only(self, mock_boto_client, aws_config):
        build_rekognition_client(replace(aws_config, scheme="http"))

        kwargs = mock_boto_client.call_args[1]
        assert kwargs["use_ssl"] is True
        assert kwargs["verify"] is False

    @patch("s3sync.aws_clients.boto3.client")
    def test_missing_credentials_returns_none(self, mock_boto_client, aws_config):
        assert build_rekognition_client(replace(aws_config, access_key_id=None)) is None
        mock_boto_client.assert_not_called()

    @patch("s3sync.aws_clients.boto3.client")
    def test_construction_error_returns_none(self, mock_boto_client, aws_config):
        mock_boto_client.side_effect = RuntimeError("boom")
        assert build_rekognition_client(aws_config) is None


@pytest.mark.unit
class TestObjectHelpers:
    """Tests for build_object_url and get_object_by_uri."""

    def test_build_object_url(self, mock_s3_client):
        url = build_object_url(mock_s3_client, "my-bucket", "1/1234/my file.jpg")
        assert url == "https://s3.eu-west-1.amazonaws.com/my-bucket/1/1234/my%20file.jpg"

    def test_build_object_url_trailing_slash_endpoint(self, mock_s3_client):
        mock_s3_client.meta.endpoint_url = "http://minio.local:9000/"
        assert build_object_url(mock_s3_client, "b", "k.txt") == "http://minio.local:9000/b/k.txt"

    def test_get_object_by_uri_success(self, mock_s3_client):
        body = MagicMock()
        mock_s3_client.get_object.return_value = {"Body": body, "ContentLength": 4}

        result = get_object_by_uri(mock_s3_client, "https://s3.eu-west-1.amazonaws.com/my-bucket/1/1234/7.jpg")

        assert result["ContentLength"] == 4
        mock_s3_client.get_object.assert_called_once_with(Bucket="my-bucket", Key="1/1234/7.jpg")
        body.close.assert_called_once()

    def test_get_object_by_uri_not_found(self, mock_s3_client):
        mock_s3_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}}, "GetObject"
        )
        assert get_object_by_uri(mock_s3_client, "s3://my-bucket/1/1234/7.jpg") is None

    def test_get_object_by_uri_connection_error(self, mock_s3_client):
        mock_s3_client.get_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.example")
        assert get_object_by_uri(mock_s3_client, "s3://my-bucket/key") is None

    @pytest.mark.parametrize("uri", ["", None, "garbage", "s3://my-bucket"])
    def test_get_object_by_uri_invalid(self, mock_s3_client, uri):
        assert get_object_by_uri(mock_s3_client, uri) is None
        mock_s3_client.get_object.assert_not_called()
