"""
Masking of credentials before configuration is logged or returned by the API
"""


def mask_sensitive_value(value, visible: int = 4):
    """
    Keep the first characters of a secret and star out the rest.

    Short values are fully masked so nothing useful leaks.
    """
    if not value or not isinstance(value, str):
        return value
    if len(value) <= 8:
        return "*" * len(value)
    return value[:visible] + "*" * (len(value) - visible)


def describe_aws_config(config) -> dict:
    """Safe, display-ready view of an AWSConfig."""
    return {
        "access_key_id": mask_sensitive_value(config.access_key_id),
        "secret_access_key": mask_sensitive_value(config.secret_access_key, visible=0),
        "region": config.region,
        "scheme": config.scheme,
        "bucket": config.bucket,
        "endpoint_url": config.endpoint_url,
    }
