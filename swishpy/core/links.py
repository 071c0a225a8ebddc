"""Share link parsing and validation."""
import re
from urllib.parse import urlparse

from .api.config import SERVICE_DOMAIN
from .exceptions import InvalidLinkError

UUID_PATTERN = r'[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}'


def share_link_regex(domain: str = SERVICE_DOMAIN) -> 're.Pattern':
    """Compiled pattern matching https://<domain>/d/<uuid> exactly."""
    return re.compile(rf'^https://{re.escape(domain)}/d/{UUID_PATTERN}$')


def is_share_link(url: str, domain: str = SERVICE_DOMAIN) -> bool:
    """
    Check whether url is a share link of the service.

    Trailing slashes, other schemes, other path segments and truncated
    UUIDs do not match.

    Example:
        >>> is_share_link("https://www.swisstransfer.com/d/3215702a-bed4-4cec-9eb6-d731048a2312")
        True
    """
    return bool(share_link_regex(domain).match(url.strip()))


def extract_link_id(url: str) -> str:
    """
    Return the link identifier: the final path segment of the URL.

    Raises:
        InvalidLinkError: If the URL has no path segment
    """
    path = urlparse(url.strip()).path
    link_id = path.rstrip('/').rsplit('/', 1)[-1]
    if not link_id:
        raise InvalidLinkError(url)
    return link_id
