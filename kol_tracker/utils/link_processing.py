"""
Link processing utilities for profile URLs and free-text platform columns.
Handles basic URL sanitization and platform detection only.
"""
import urllib.parse
from typing import Optional

from kol_tracker.models.db.enums import SocialPlatform
from .logger import get_logger

logger = get_logger(__name__)

# Hostname fragments per platform, checked in this order.
_HOST_PATTERNS: list[tuple[SocialPlatform, tuple[str, ...]]] = [
    (SocialPlatform.YOUTUBE, ("youtube", "youtu.be")),
    (SocialPlatform.TIKTOK, ("tiktok",)),
    (SocialPlatform.TWITTER, ("twitter", "x.com")),
    (SocialPlatform.INSTAGRAM, ("instagram",)),
    (SocialPlatform.TELEGRAM, ("telegram", "t.me")),
]

# Free-text aliases (spreadsheet "Platform" column), matched as substrings.
_TEXT_ALIASES: list[tuple[SocialPlatform, tuple[str, ...]]] = [
    (SocialPlatform.YOUTUBE, ("youtube", "yt")),
    (SocialPlatform.TIKTOK, ("tiktok", "tik tok")),
    (SocialPlatform.TWITTER, ("twitter", "x.com")),
    (SocialPlatform.INSTAGRAM, ("instagram", "ig")),
    (SocialPlatform.TELEGRAM, ("telegram", "tg")),
]


def clean_link(url: str) -> str:
    """
    Strip whitespace, query parameters, fragments and trailing slashes.

    Example:
        clean_link(" https://tiktok.com/@wendy/?lang=en ") -> "https://tiktok.com/@wendy"
    """
    if not url or not url.strip():
        raise ValueError("URL cannot be empty")

    url = url.strip()
    parsed = urllib.parse.urlparse(url)
    clean_url = urllib.parse.urlunparse(parsed._replace(query="", fragment=""))
    if clean_url.endswith("/") and clean_url not in ("https://", "http://"):
        clean_url = clean_url.rstrip("/")
    return clean_url


def validate_url_format(url: str) -> bool:
    """True when the URL has both a scheme and a host."""
    try:
        result = urllib.parse.urlparse(url)
        return all([result.scheme, result.netloc])
    except ValueError:
        return False


def platform_from_url(url: str) -> Optional[SocialPlatform]:
    """
    Detect the social platform from a profile URL's hostname.

    Returns None for unparseable URLs or unknown hosts.
    """
    if not url or not validate_url_format(url.strip()):
        return None

    hostname = (urllib.parse.urlparse(url.strip()).hostname or "").lower()
    for platform, fragments in _HOST_PATTERNS:
        if any(fragment in hostname for fragment in fragments):
            return platform

    logger.debug("Unknown platform host", url=url)
    return None


def detect_platforms(text: str) -> list[SocialPlatform]:
    """
    Detect every platform mentioned in a free-text cell.

    ``"YouTube / TikTok"`` -> ``[YOUTUBE, TIKTOK]``. Order follows the enum,
    not the text.
    """
    if not text:
        return []
    lowered = text.lower()
    return [
        platform
        for platform, aliases in _TEXT_ALIASES
        if any(alias in lowered for alias in aliases)
    ]


__all__ = ["clean_link", "validate_url_format", "platform_from_url", "detect_platforms"]
