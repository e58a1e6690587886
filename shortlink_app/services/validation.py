"""
Validation for add-link requests.

Runs before the store is touched, so the common failure cases come back
as field messages instead of exceptions.
"""

import re
from typing import Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shortlink_app.config import Settings
from shortlink_app.schemas.link import AddLinkFailure, AddLinkRequest
from shortlink_app.services.key_generator import RESERVED_KEYS
from shortlink_app.services.link_service import LinkService

KEY_PATTERN = re.compile(r"[0-9A-Za-z_-]+")

_url_adapter = TypeAdapter(AnyUrl)


def validate_link(link: str) -> Optional[str]:
    """Message describing what is wrong with the link, or None"""
    if not link:
        return "Link cannot be empty"

    try:
        url = _url_adapter.validate_python(link)
    except ValidationError:
        return "Invalid URL"

    if not url.host:
        return "Invalid URL"
    return None


def validate_key_format(key: str, settings: Settings) -> Optional[str]:
    """Message describing what is wrong with the key, or None (ignores current usage)"""
    if len(key) < settings.min_key_length:
        return f"Key cannot be less than {settings.min_key_length} characters"
    if not KEY_PATTERN.fullmatch(key):
        return "Key can only contain 0-9, A-Z, a-z, _ or -"
    if key in RESERVED_KEYS:
        return f"Key '{key}' is reserved"
    if key in settings.blacklisted_keys:
        return f"Key '{key}' is disallowed"
    return None


async def validate_add_link(
    request: AddLinkRequest,
    service: LinkService,
    settings: Settings
) -> Optional[AddLinkFailure]:
    """
    Validate an add-link request.

    Returns:
        AddLinkFailure with a message per bad field, or None if valid
    """
    failure = AddLinkFailure(link=validate_link(request.link))

    if request.key is not None:
        failure.key = validate_key_format(request.key, settings)
        if failure.key is None and await service.key_in_use(request.key):
            failure.key = "Key already in use"

    if failure.key is not None or failure.link is not None:
        return failure
    return None
