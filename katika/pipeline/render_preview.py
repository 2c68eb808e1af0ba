from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int = 600) -> None:
    page = doc.load_page(page_index)

    # scale so the short side of the thumbnail is at least min_px pixels
    rect = page.rect
    short_side = min(rect.width, rect.height)
    zoom = max(1.0, min_px / float(short_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(out_path))


def render_cover_preview(pdf_path: Path, out_path: Path | None = None) -> Path:
    """Write a PNG thumbnail of the cover page next to the PDF."""
    out_path = out_path or pdf_path.with_suffix(".png")
    with fitz.open(str(pdf_path)) as doc:
        _render_page_to_png(doc, 0, out_path)
    return out_path


def page_count(pdf_path: Path) -> int:
    with fitz.open(str(pdf_path)) as doc:
        return doc.page_count
