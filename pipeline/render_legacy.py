"""Legacy renderer — DocumentOutline to a Word-compatible HTML document.

Word opens HTML carrying the Office XML namespaces as a ``.doc`` file. The
markup is rendered from ``templates/legacy_document.html.j2`` with Jinja2.

Letterhead and logo images are embedded by reference. The signature image is
resolved and inlined as a data URI so the signature survives offline; when it
cannot be resolved, blank space is left in its place.
"""
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from models.design import DocumentDesign
from models.outline import DocumentOutline, ImageRole
from pipeline.assets import AssetResolver, prefetch_images, to_data_uri

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
_TEMPLATE_NAME = "legacy_document.html.j2"


async def render(
    outline: DocumentOutline,
    resolver: AssetResolver,
    design: DocumentDesign | None = None,
    max_concurrent_fetches: int = 4,
) -> str:
    """Resolve the signature image and render the outline to markup."""
    design = design or DocumentDesign()
    image_srcs: dict[ImageRole, str | None] = {}
    for element in outline.images():
        if element.role != "signature":
            image_srcs[element.role] = element.source

    signature = [e for e in outline.images() if e.role == "signature"]
    resolved = await prefetch_images(signature, resolver, limit=max_concurrent_fetches)
    if signature:
        data = resolved.get("signature")
        image_srcs["signature"] = to_data_uri(data) if data else None

    return render_html(outline, design, image_srcs)


def render_html(
    outline: DocumentOutline,
    design: DocumentDesign,
    image_srcs: dict[ImageRole, str | None],
) -> str:
    """Render the Jinja2 template to an HTML string."""
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "html.j2"]),
    )
    env.filters["nl2br"] = _nl2br
    template = env.get_template(_TEMPLATE_NAME)
    html = template.render(outline=outline, ds=design, image_srcs=image_srcs)
    logger.debug("Legacy markup rendered: %d characters", len(html))
    return html


def _nl2br(text: str) -> Markup:
    return Markup("<br>\n").join(escape(line) for line in text.split("\n"))
