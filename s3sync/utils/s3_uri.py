"""
Parse S3 object locators into bucket and key.

Understands the same shapes as the AWS SDK URI parsers:

- ``s3://bucket/key``
- virtual-hosted style, ``https://bucket.s3.eu-west-1.amazonaws.com/key``
- path style, ``https://s3.eu-west-1.amazonaws.com/bucket/key``
- the dualstack, accelerate and FIPS variants of both
  (``https://bucket.s3-accelerate.amazonaws.com/key``)
- custom S3-compatible endpoints, always path style
  (``http://minio.local:9000/bucket/key``)
"""

import logging
import re
from typing import NamedTuple, Optional
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)

_AWS_HOST_RE = re.compile(
    r"^(?:(?P<bucket>.+?)\.)?"
    r"s3(?:-accelerate|-fips|-website)?(?:[.-]dualstack)?"
    r"(?:[.-](?P<region>[a-z0-9-]+))?"
    r"\.amazonaws\.com$",
    re.IGNORECASE,
)


class S3Location(NamedTuple):
    bucket: str
    key: Optional[str]
    region: Optional[str] = None
    path_style: bool = False


def _split_path_style(path: str):
    path = path[1:] if path.startswith("/") else path
    bucket, _, key = path.partition("/")
    return bucket, key


def parse_s3_uri(uri) -> Optional[S3Location]:
    """
    Parse an S3 URI to usable information.

    Returns:
        The parsed location, or None when the value is not a string, is empty
        or does not follow any supported grammar. Never raises.
    """
    if not uri or not isinstance(uri, str):
        return None

    try:
        parsed = urlparse(uri.strip())
        host = parsed.hostname
    except ValueError as e:
        logger.warning(f"Parsing failed for URI '{uri}': {e}")
        return None

    scheme = parsed.scheme.lower()
    region = None
    path_style = True

    if scheme == "s3":
        bucket = parsed.netloc
        key = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
        path_style = False
    elif scheme in ("http", "https"):
        if not host:
            logger.warning(f"Parsing failed for URI '{uri}': no host found")
            return None

        if host.endswith("amazonaws.com"):
            match = _AWS_HOST_RE.match(host)
            if not match:
                logger.warning(f"Parsing failed for URI '{uri}': unrecognized S3 host '{host}'")
                return None
            region = match.group("region")
            if match.group("bucket"):
                bucket = match.group("bucket")
                key = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
                path_style = False
            else:
                bucket, key = _split_path_style(parsed.path)
        else:
            bucket, key = _split_path_style(parsed.path)
    else:
        logger.warning(f"Parsing failed for URI '{uri}': unsupported scheme '{parsed.scheme}'")
        return None

    if not bucket:
        logger.warning(f"Parsing failed for URI '{uri}': no bucket found")
        return None

    return S3Location(bucket=bucket, key=unquote(key) or None, region=region, path_style=path_style)
