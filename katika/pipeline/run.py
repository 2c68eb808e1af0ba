from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
from typing import Optional, Tuple

from .. import config
from ..models import Artist, DocumentFormat, GeneratedFile, Portfolio
from ..storage import FileSink, document_path, public_url
from ..store import PortfolioStore
from .content import ContentRecord, build_content_record
from .render_html import compose_html
from .render_pdf import render_pdf
from .render_preview import render_cover_preview
from .theme import resolve_theme


logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Writing a generated document to storage failed."""


def _load(store: PortfolioStore, portfolio_id: int) -> Tuple[Portfolio, Artist]:
    portfolio = store.get_portfolio(portfolio_id)
    if portfolio is None:
        raise LookupError("Portfolio not found")
    artist = store.get_artist(portfolio.artist_id)
    if artist is None:
        raise LookupError("Artist not found")
    return portfolio, artist


def write_pdf(content: ContentRecord, customizations: Optional[dict], path: Path, generated_at: Optional[datetime] = None) -> int:
    """Render into a durable file sink; returns the byte size once the file is in place."""
    theme = resolve_theme(customizations)
    sink = FileSink(path)
    try:
        render_pdf(content, theme, sink, generated_at=generated_at)
    except Exception:
        sink.discard()
        raise
    return sink.close()


def write_html(content: ContentRecord, template_id: Optional[str], customizations: Optional[dict], path: Path) -> int:
    document = compose_html(content, template_id, resolve_theme(customizations))
    with FileSink(path) as sink:
        sink.write(document.encode("utf-8"))
    return sink.size


def generate_pdf(portfolio_id: int, store: PortfolioStore) -> GeneratedFile:
    portfolio, artist = _load(store, portfolio_id)
    content = build_content_record(artist, portfolio)
    path = document_path(portfolio_id, "pdf")
    try:
        size = write_pdf(content, portfolio.customizations, path)
    except Exception as exc:
        logger.exception("PDF generation failed for portfolio %s", portfolio_id)
        raise GenerationError(str(exc)) from exc

    if config.RENDER_PREVIEWS:
        # the PDF is already durable; a missing thumbnail does not fail the request
        try:
            render_cover_preview(path)
        except Exception:
            logger.exception("Cover preview failed for %s", path.name)

    logger.info("Generated %s (%d bytes) for portfolio %s", path.name, size, portfolio_id)
    generated = GeneratedFile(
        portfolio_id=portfolio_id,
        format=DocumentFormat.PDF.value,
        filename=path.name,
        url=public_url(path),
        size=size,
    )
    return store.record_generated_file(generated)


def generate_html(portfolio_id: int, store: PortfolioStore) -> GeneratedFile:
    portfolio, artist = _load(store, portfolio_id)
    content = build_content_record(artist, portfolio)
    path = document_path(portfolio_id, "html")
    try:
        size = write_html(content, portfolio.template, portfolio.customizations, path)
    except Exception as exc:
        logger.exception("HTML generation failed for portfolio %s", portfolio_id)
        raise GenerationError(str(exc)) from exc

    logger.info("Generated %s (%d bytes) for portfolio %s", path.name, size, portfolio_id)
    generated = GeneratedFile(
        portfolio_id=portfolio_id,
        format=DocumentFormat.HTML.value,
        filename=path.name,
        url=public_url(path),
        size=size,
    )
    return store.record_generated_file(generated)
