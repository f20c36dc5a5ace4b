"""Exceptions raised while exporting a document.

Asset errors are recovered per image by the renderers. ``RenderFailure`` is
the only error an export surfaces to its caller.
"""


def _describe(reference: str, limit: int = 60) -> str:
    # data: URIs can be megabytes long; keep log lines readable
    return reference if len(reference) <= limit else reference[:limit] + "…"


class AssetError(Exception):
    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"{_describe(reference)}: {reason}")
        self.reference = reference
        self.reason = reason


class AssetFetchError(AssetError):
    """Network retrieval of an image reference failed."""


class AssetDecodeError(AssetError):
    """An image payload could not be decoded to embeddable bytes."""


FetchError = AssetFetchError
DecodeError = AssetDecodeError


class RenderFailure(Exception):
    """Document assembly failed; no file is produced."""
