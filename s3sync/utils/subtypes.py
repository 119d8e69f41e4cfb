"""
Supported file subtypes for uploading to S3.

The application decides which subtypes are uploaded (``S3_UPLOAD_SUBTYPES``)
and may adjust the list at runtime through hooks. Every candidate is checked
with an ``is_file_like`` predicate; anything that is not a file-like subtype
is dropped without complaint.
"""

import logging
from typing import Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)

SubtypesHook = Callable[[List[str]], Optional[Iterable[str]]]

_hooks: List[SubtypesHook] = []


def register_upload_subtypes_hook(hook: SubtypesHook) -> None:
    """Register a hook that receives the current subtype list and returns a new one."""
    if hook not in _hooks:
        _hooks.append(hook)


def unregister_upload_subtypes_hook(hook: SubtypesHook) -> None:
    if hook in _hooks:
        _hooks.remove(hook)


def default_is_file_like(subtype: str) -> bool:
    from s3sync.config import settings

    return subtype in (settings.file_like_subtypes or [])


def get_supported_upload_subtypes(
    candidates: Optional[Iterable[str]] = None,
    is_file_like: Optional[Callable[[str], bool]] = None,
) -> List[str]:
    """
    Get the subtypes whose files should be uploaded.

    Args:
        candidates: Starting list; defaults to ``settings.s3_upload_subtypes``
        is_file_like: Predicate validating a subtype; defaults to membership in
            ``settings.file_like_subtypes``

    Returns:
        Validated, de-duplicated subtypes in their original order
    """
    if candidates is None:
        from s3sync.config import settings

        candidates = settings.s3_upload_subtypes or []
    if is_file_like is None:
        is_file_like = default_is_file_like

    subtypes = list(candidates)
    for hook in list(_hooks):
        result = hook(list(subtypes))
        if result is None:
            # Hook left the list untouched
            continue
        if isinstance(result, str):
            logger.warning(f"Upload subtypes hook {hook!r} returned a string, ignoring its result")
            continue
        subtypes = list(result)

    supported = []
    for subtype in subtypes:
        if not subtype or not isinstance(subtype, str) or subtype in supported:
            continue
        if not is_file_like(subtype):
            continue
        supported.append(subtype)
    return supported
