"""Test doubles and small image builders shared across test modules."""
import base64
import io
from pathlib import Path

from PIL import Image

from pipeline.errors import AssetFetchError

FIXTURES_DIR = Path(__file__).parent / "fixtures"
CONFIG_FIXTURES_DIR = FIXTURES_DIR / "config"


def make_png(width: int = 4, height: int = 2, color: str = "red") -> bytes:
    out = io.BytesIO()
    Image.new("RGB", (width, height), color).save(out, format="PNG")
    return out.getvalue()


def data_uri(payload: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


class StubResolver:
    """Resolver double: maps references to bytes or to an exception to raise."""

    def __init__(self, assets: dict[str, bytes | Exception] | None = None) -> None:
        self.assets = assets or {}
        self.calls: list[str] = []

    async def resolve(self, reference: str) -> bytes:
        self.calls.append(reference)
        value = self.assets.get(reference)
        if value is None:
            raise AssetFetchError(reference, "not found")
        if isinstance(value, Exception):
            raise value
        return value
