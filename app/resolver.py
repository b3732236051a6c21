"""Turn a poster URL into a displayable image or a classified error.

``resolve`` never raises for the recognised failure kinds: a null URL, a URL
that fails syntax validation, and a fetch or decode error. Each comes back as
a ``Failed`` result carrying the message shown in the status label.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import http.client
from typing import Callable, Optional, Union
import urllib.error
import urllib.request
from urllib.parse import urlparse

from loguru import logger
from PySide6 import QtGui


USER_AGENT = "PosterViewer/1.0"

NULL_URL_MESSAGE = "Error: The provided URL is null."
MALFORMED_URL_MESSAGE = "Error: The URL is invalid or unsupported."
FETCH_ERROR_PREFIX = "Error loading poster: "

NETWORK_SCHEMES = {"http", "https", "ftp"}
LOCAL_SCHEMES = {"file", "data"}

ImageHandle = QtGui.QImage
Fetcher = Callable[[str], bytes]


class ErrorKind(Enum):
    NULL_URL = "null_url"
    MALFORMED_URL = "malformed_url"
    FETCH_OR_DECODE_ERROR = "fetch_or_decode_error"


@dataclass(frozen=True)
class Loaded:
    url: str
    image: ImageHandle


@dataclass(frozen=True)
class Failed:
    reason: ErrorKind
    message: str


ResolutionResult = Union[Loaded, Failed]


class ImageDecodeError(Exception):
    pass


def is_valid_url(url: str) -> bool:
    if not url or url != url.strip() or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urlparse(url)
        parsed.port  # raises ValueError when out of range
    except ValueError:
        return False
    scheme = parsed.scheme.lower()
    if scheme in NETWORK_SCHEMES:
        return bool(parsed.hostname)
    if scheme in LOCAL_SCHEMES:
        return bool(parsed.path)
    return False


def fetch_bytes(url: str) -> bytes:
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    with urllib.request.urlopen(request) as response:
        return response.read()


def decode_image(data: bytes) -> ImageHandle:
    image = QtGui.QImage.fromData(data)
    if image.isNull():
        raise ImageDecodeError("Unsupported image format")
    return image


def describe_error(exc: BaseException) -> str:
    # HTTPError is a URLError whose str() already carries the status line.
    if isinstance(exc, urllib.error.URLError) and not isinstance(exc, urllib.error.HTTPError):
        reason = exc.reason
        if isinstance(reason, OSError) and reason.strerror:
            return reason.strerror
        return str(reason)
    text = str(exc)
    return text or type(exc).__name__


def resolve(url: Optional[str], fetcher: Optional[Fetcher] = None, debug: bool = False) -> ResolutionResult:
    if url is None:
        logger.warning("Poster URL is null")
        return Failed(ErrorKind.NULL_URL, NULL_URL_MESSAGE)
    if not is_valid_url(url):
        logger.warning(f"Poster URL is invalid or unsupported: {url!r}")
        return Failed(ErrorKind.MALFORMED_URL, MALFORMED_URL_MESSAGE)

    fetch = fetcher or fetch_bytes
    logger.debug(f"Fetching poster {url}")
    try:
        data = fetch(url)
        image = decode_image(data)
    except (OSError, ValueError, OverflowError, http.client.HTTPException, ImageDecodeError) as exc:
        message = FETCH_ERROR_PREFIX + describe_error(exc)
        if debug:
            logger.opt(exception=exc).warning(f"{message} ({url})")
        else:
            logger.warning(f"{message} ({url})")
        return Failed(ErrorKind.FETCH_OR_DECODE_ERROR, message)

    logger.info(f"Loaded poster {url} ({image.width()}x{image.height()})")
    return Loaded(url=url, image=image)
