"""Export — snapshot a document and render it to a downloadable artifact.

The snapshot (deep copy of the metadata, tuple of frozen blocks) is taken
when ``export`` is called, before the returned coroutine starts, so edits
made while images are being fetched are never seen by the running export.

Outputs:
  legacy  UTF-8 BOM + Word HTML   application/msword;charset=utf-8   <title>.doc
  modern  Office Open XML package application/vnd...document          <title>.docx
"""
import logging
import re
from collections.abc import Coroutine, Sequence
from datetime import datetime, time
from typing import Literal

from pydantic import BaseModel

from models.blocks import Block
from models.design import DocumentDesign
from models.document import DocumentMetadata
from models.labels import LabelTable
from pipeline import render_legacy, render_modern
from pipeline.assets import AssetResolver
from pipeline.errors import RenderFailure
from pipeline.outline import build_outline
from settings import Settings

logger = logging.getLogger(__name__)

ExportFormat = Literal["legacy", "modern"]

LEGACY_MIME_TYPE = "application/msword;charset=utf-8"
MODERN_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Required by Word's legacy import to detect UTF-8
_UTF8_BOM = "\ufeff".encode("utf-8")

_ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class ExportArtifact(BaseModel):
    data: bytes
    mime_type: str
    filename: str


class Exporter:
    """Holds the configuration shared by every export of a session."""

    def __init__(
        self,
        settings: Settings | None = None,
        labels: LabelTable | None = None,
        design: DocumentDesign | None = None,
        resolver: AssetResolver | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.labels = labels or LabelTable.load_or_default(self.settings.labels_yaml_path)
        self.design = design or DocumentDesign.load_or_default(self.settings.design_yaml_path)
        self.resolver = resolver or AssetResolver(timeout_s=self.settings.asset_fetch_timeout_s)

    def export(
        self,
        export_format: ExportFormat,
        metadata: DocumentMetadata,
        blocks: Sequence[Block],
    ) -> Coroutine[None, None, ExportArtifact]:
        """Snapshot the inputs now and return the coroutine that renders them."""
        return self._run(export_format, metadata.model_copy(deep=True), tuple(blocks))

    async def _run(
        self,
        export_format: ExportFormat,
        metadata: DocumentMetadata,
        blocks: tuple[Block, ...],
    ) -> ExportArtifact:
        try:
            if export_format == "legacy":
                artifact = await self._export_legacy(metadata, blocks)
            elif export_format == "modern":
                artifact = await self._export_modern(metadata, blocks)
            else:
                raise ValueError(f"Unknown export format: {export_format!r}")
        except Exception as exc:
            logger.error("Export of '%s' (%s) failed: %s", metadata.title, export_format, exc)
            raise RenderFailure(f"{export_format} export failed: {exc}") from exc

        logger.info(
            "Export complete → %s (%d bytes, %d blocks)",
            artifact.filename,
            len(artifact.data),
            len(blocks),
        )
        return artifact

    async def _export_legacy(self, metadata: DocumentMetadata, blocks: tuple[Block, ...]) -> ExportArtifact:
        outline = build_outline(metadata, blocks, self.labels)
        html = await render_legacy.render(
            outline,
            self.resolver,
            self.design,
            max_concurrent_fetches=self.settings.max_concurrent_fetches,
        )
        return ExportArtifact(
            data=_UTF8_BOM + html.encode("utf-8"),
            mime_type=LEGACY_MIME_TYPE,
            filename=output_filename(metadata.title, ".doc", self.labels.default_filename),
        )

    async def _export_modern(self, metadata: DocumentMetadata, blocks: tuple[Block, ...]) -> ExportArtifact:
        outline = build_outline(metadata, blocks, self.labels)
        data = await render_modern.render(
            outline,
            self.resolver,
            self.design,
            max_concurrent_fetches=self.settings.max_concurrent_fetches,
            created=datetime.combine(metadata.date, time()),
        )
        return ExportArtifact(
            data=data,
            mime_type=MODERN_MIME_TYPE,
            filename=output_filename(metadata.title, ".docx", self.labels.default_filename),
        )


def export_document(
    export_format: ExportFormat,
    metadata: DocumentMetadata,
    blocks: Sequence[Block],
    exporter: Exporter | None = None,
) -> Coroutine[None, None, ExportArtifact]:
    return (exporter or Exporter()).export(export_format, metadata, blocks)


def export_legacy(
    metadata: DocumentMetadata,
    blocks: Sequence[Block],
    exporter: Exporter | None = None,
) -> Coroutine[None, None, ExportArtifact]:
    return (exporter or Exporter()).export("legacy", metadata, blocks)


def export_modern(
    metadata: DocumentMetadata,
    blocks: Sequence[Block],
    exporter: Exporter | None = None,
) -> Coroutine[None, None, ExportArtifact]:
    return (exporter or Exporter()).export("modern", metadata, blocks)


def output_filename(title: str, extension: str, default: str = "dokumen") -> str:
    """``<title><extension>``, falling back to ``default`` for a blank title."""
    stem = _ILLEGAL_FILENAME_CHARS.sub("_", title).strip()
    return f"{stem or default}{extension}"
