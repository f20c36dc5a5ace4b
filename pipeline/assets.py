"""Asset resolution — turn image references into raw, embeddable bytes.

A reference is either a ``data:`` URI (decoded in place) or an ``http(s)``
URL (fetched with aiohttp). The payload is identified with Pillow; formats a
word-processor package cannot embed are re-encoded as PNG.

The resolver raises ``AssetFetchError`` / ``AssetDecodeError`` and never
falls back on its own. ``prefetch_images`` applies the per-image failure
policy on behalf of the renderers.
"""
import asyncio
import base64
import binascii
import io
import logging
from collections.abc import Iterable
from urllib.parse import unquote_to_bytes

import aiohttp
from PIL import Image, UnidentifiedImageError

from models.outline import ImageElement, ImageRole
from pipeline.errors import AssetDecodeError, AssetError, AssetFetchError

logger = logging.getLogger(__name__)

# Formats python-docx can place in a package as-is
_EMBEDDABLE_FORMATS = frozenset({"PNG", "JPEG", "GIF", "BMP", "TIFF"})


class AssetResolver:
    """Resolve image references to bytes.

    Pass an open ``aiohttp.ClientSession`` to share connections across many
    fetches; otherwise each fetch opens and closes its own session.
    """

    def __init__(
        self,
        timeout_s: float | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_s) if timeout_s else None
        self._session = session

    async def resolve(self, reference: str) -> bytes:
        scheme = reference.split(":", 1)[0].lower() if ":" in reference else ""
        if scheme == "data":
            payload = _decode_data_uri(reference)
        elif scheme in ("http", "https"):
            payload = await self._fetch(reference)
        else:
            raise AssetDecodeError(reference, "unsupported reference scheme")
        return _normalise_image(reference, payload)

    async def _fetch(self, url: str) -> bytes:
        logger.debug("Fetching asset %s", url)
        try:
            if self._session is not None:
                return await _get(self._session, url)
            kwargs = {"timeout": self._timeout} if self._timeout else {}
            async with aiohttp.ClientSession(**kwargs) as session:
                return await _get(session, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise AssetFetchError(url, str(exc) or type(exc).__name__) from exc


async def _get(session: aiohttp.ClientSession, url: str) -> bytes:
    async with session.get(url) as response:
        response.raise_for_status()
        return await response.read()


def _decode_data_uri(reference: str) -> bytes:
    header, sep, data = reference.partition(",")
    if not sep:
        raise AssetDecodeError(reference, "data URI has no payload")
    if header.endswith(";base64"):
        # Whitespace inside the payload is ignored, as browsers do
        data = "".join(data.split())
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AssetDecodeError(reference, f"invalid base64: {exc}") from exc
    return unquote_to_bytes(data)


def _normalise_image(reference: str, payload: bytes) -> bytes:
    if not payload:
        raise AssetDecodeError(reference, "empty payload")
    try:
        with Image.open(io.BytesIO(payload)) as image:
            if image.format in _EMBEDDABLE_FORMATS:
                image.verify()
                return payload
            logger.debug("Converting %s image to PNG", image.format)
            out = io.BytesIO()
            image.save(out, format="PNG")
            return out.getvalue()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise AssetDecodeError(reference, f"not a readable image: {exc}") from exc


def image_mime_type(data: bytes) -> str:
    """MIME type of resolved image bytes, for inlining as a data URI."""
    with Image.open(io.BytesIO(data)) as image:
        return Image.MIME.get(image.format or "", "image/png")


def to_data_uri(data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{image_mime_type(data)};base64,{encoded}"


async def prefetch_images(
    elements: Iterable[ImageElement],
    resolver: AssetResolver,
    limit: int = 4,
) -> dict[ImageRole, bytes | None]:
    """Resolve images concurrently, keyed by role.

    A failed image is logged and stored as ``None``; the caller decides
    whether that means "omit" or "blank space". Anything other than an
    ``AssetError`` propagates.
    """
    semaphore = asyncio.Semaphore(limit)

    async def _one(element: ImageElement) -> tuple[ImageRole, bytes | None]:
        async with semaphore:
            try:
                return element.role, await resolver.resolve(element.source)
            except AssetError as exc:
                logger.warning("Could not resolve %s image, leaving it out: %s", element.role, exc)
                return element.role, None

    tasks = [asyncio.ensure_future(_one(element)) for element in elements]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    return dict(results)
