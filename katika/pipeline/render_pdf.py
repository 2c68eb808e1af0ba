from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from ..config import PLATFORM_NAME, load_style_preset
from .content import ContentRecord
from .theme import ColorTheme, resolve_theme, rgb_color


PAGE_SIZE: Tuple[float, float] = A4


def _s(style: dict, key: str, default):
    return style.get(key, default)


def _baseline(ph: float, top: float, font: str, size: float) -> float:
    """
    Layout is expressed top-down (distance from the top edge to the top of
    the text); reportlab draws from a bottom-left origin at the baseline.
    """
    return ph - top - pdfmetrics.getAscent(font, size)


def _fit_font(canv: canvas.Canvas, text: str, font_name: str, base_size: float, max_width: float) -> float:
    size = float(base_size)
    while size > 12.0:
        if canv.stringWidth(text, font_name, size) <= max_width:
            return size
        size -= 1.0
    return 12.0


def _wrap_words(canv: canvas.Canvas, text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    words = (text or "").split()
    if not words:
        return [""]

    lines: List[str] = []
    cur: List[str] = []

    for w in words:
        test = " ".join(cur + [w])
        if canv.stringWidth(test, font_name, font_size) <= max_width:
            cur.append(w)
            continue

        if cur:
            lines.append(" ".join(cur))
            cur = [w]
        else:
            # a single word wider than the column gets a line of its own
            lines.append(w)

    if cur:
        lines.append(" ".join(cur))

    return lines


def _draw_text_block(
    canv: canvas.Canvas,
    text: str,
    x: float,
    top: float,
    width: float,
    style: dict,
    font_size: Optional[float] = None,
    color: Optional[colors.Color] = None,
    justify: bool = True,
) -> float:
    """
    Draw word-wrapped (optionally justified) text starting at ``top``.

    A block that reaches the bottom margin continues at the top margin of a
    fresh page. Returns the top coordinate just below the last line.
    """
    font = str(_s(style, "font_name", "Helvetica"))
    size = float(font_size or _s(style, "body_size", 12))
    leading = size * 1.3 if font_size else float(_s(style, "body_leading", 16))
    margin = float(_s(style, "margin", 50))
    ink = color or rgb_color(_s(style, "ink_color", "#333333"))
    pw, ph = PAGE_SIZE

    canv.setFont(font, size)
    canv.setFillColor(ink)

    for paragraph in (text or "").replace("\r\n", "\n").split("\n"):
        lines = _wrap_words(canv, paragraph, font, size, width)
        for index, line in enumerate(lines):
            if top + leading > ph - margin:
                canv.showPage()
                canv.setFont(font, size)
                canv.setFillColor(ink)
                top = margin
            is_last = index == len(lines) - 1
            gaps = line.count(" ")
            text_obj = canv.beginText(x, _baseline(ph, top, font, size))
            text_obj.setFont(font, size)
            if justify and not is_last and gaps:
                extra = (width - canv.stringWidth(line, font, size)) / gaps
                text_obj.setWordSpace(max(0.0, extra))
            text_obj.textLine(line)
            canv.drawText(text_obj)
            top += leading
    return top


def _draw_header_band(canv: canvas.Canvas, style: dict, theme: ColorTheme, label: str, pw: float, ph: float) -> None:
    margin = float(_s(style, "margin", 50))
    band_h = float(_s(style, "band_height", 40))
    font = str(_s(style, "bold_font_name", "Helvetica-Bold"))
    size = float(_s(style, "band_label_size", 18))

    canv.setFillColor(rgb_color(theme.accent))
    canv.rect(margin, ph - margin - band_h, pw - 2 * margin, band_h, stroke=0, fill=1)

    canv.setFillColor(colors.white)
    canv.setFont(font, size)
    canv.drawString(margin + 10, _baseline(ph, margin + 15, font, size), label)


# -------------------- Skills chips --------------------
@dataclass(frozen=True)
class Chip:
    label: str
    x: float
    top: float
    width: float
    height: float


def layout_chips(
    labels: Sequence[str],
    measure: Callable[[str], float],
    page_width: float,
    margin: float = 50,
    start_top: float = 120,
    padding: float = 20,
    gap: float = 10,
    height: float = 25,
    row_height: float = 35,
) -> List[Chip]:
    """
    Place chips left to right, wrapping to a new row when the next chip
    would cross the right margin. Earlier rows are never revisited and
    rows past the page bottom are not moved to a new page.
    """
    chips: List[Chip] = []
    x = margin
    top = start_top
    right = page_width - margin
    for label in labels:
        width = measure(label) + padding
        if x + width > right and x > margin:
            x = margin
            top += row_height
        chips.append(Chip(label=label, x=x, top=top, width=width, height=height))
        x += width + gap
    return chips


# -------------------- Pages --------------------
def _page_cover(canv: canvas.Canvas, content: ContentRecord, theme: ColorTheme, style: dict, pw: float, ph: float, arg=None) -> None:
    margin = float(_s(style, "margin", 50))
    font = str(_s(style, "font_name", "Helvetica"))
    bold = str(_s(style, "bold_font_name", "Helvetica-Bold"))
    primary = rgb_color(theme.primary)
    banner_h = float(_s(style, "banner_height", 200))

    canv.setFillColor(primary)
    canv.rect(0, ph - banner_h, pw, banner_h, stroke=0, fill=1)

    max_w = pw - 2 * margin
    name_size = _fit_font(canv, content.name, bold, float(_s(style, "name_size", 32)), max_w)
    canv.setFillColor(colors.white)
    canv.setFont(bold, name_size)
    canv.drawCentredString(pw / 2, _baseline(ph, 80, bold, name_size), content.name)

    category = content.category.replace("_", " ").upper() if content.category else "CREATIVE PROFESSIONAL"
    size = float(_s(style, "category_size", 18))
    canv.setFont(font, size)
    canv.drawCentredString(pw / 2, _baseline(ph, 120, font, size), category)

    if content.experience_level:
        size = float(_s(style, "experience_size", 14))
        canv.setFont(font, size)
        canv.drawCentredString(pw / 2, _baseline(ph, 145, font, size), f"{content.experience_level.upper()} LEVEL")

    canv.setFillColor(rgb_color(theme.accent))
    canv.rect(margin, ph - 183, pw - 2 * margin, 3, stroke=0, fill=1)

    title = content.portfolio_title or content.name
    title_size = float(_s(style, "title_size", 24))
    top = _draw_text_block(canv, title, margin, 220, max_w, style, font_size=title_size, color=primary, justify=False)

    if content.description:
        _draw_text_block(canv, content.description, margin, top + title_size * 1.3, max_w, style)


def _page_about(canv: canvas.Canvas, content: ContentRecord, theme: ColorTheme, style: dict, pw: float, ph: float, arg=None) -> None:
    margin = float(_s(style, "margin", 50))
    _draw_header_band(canv, style, theme, "ABOUT THE ARTIST", pw, ph)
    _draw_text_block(canv, content.about_me, margin, 110, pw - 2 * margin, style)


def _page_section(canv: canvas.Canvas, content: ContentRecord, theme: ColorTheme, style: dict, pw: float, ph: float, arg: int = 0) -> None:
    margin = float(_s(style, "margin", 50))
    section = content.sections[arg]
    _draw_header_band(canv, style, theme, section.label, pw, ph)
    if section.content:
        _draw_text_block(canv, section.content, margin, 110, pw - 2 * margin, style)


def _page_skills(canv: canvas.Canvas, content: ContentRecord, theme: ColorTheme, style: dict, pw: float, ph: float, arg=None) -> None:
    margin = float(_s(style, "margin", 50))
    font = str(_s(style, "font_name", "Helvetica"))
    size = float(_s(style, "chip_size", 10))
    _draw_header_band(canv, style, theme, "SKILLS & SPECIALTIES", pw, ph)

    chips = layout_chips(
        content.skills,
        measure=lambda label: canv.stringWidth(label, font, size),
        page_width=pw,
        margin=margin,
        start_top=120,
        padding=float(_s(style, "chip_padding", 20)),
        gap=float(_s(style, "chip_gap", 10)),
        height=float(_s(style, "chip_height", 25)),
        row_height=float(_s(style, "chip_row_height", 35)),
    )
    primary = rgb_color(theme.primary)
    radius = float(_s(style, "chip_radius", 6))
    for chip in chips:
        canv.setFillColor(primary)
        canv.roundRect(chip.x, ph - chip.top - chip.height, chip.width, chip.height, radius=radius, stroke=0, fill=1)
        canv.setFillColor(colors.white)
        canv.setFont(font, size)
        canv.drawString(chip.x + 10, _baseline(ph, chip.top + 8, font, size), chip.label)


def _draw_labelled(canv: canvas.Canvas, style: dict, theme: ColorTheme, label: str, value: str, y: float, ph: float) -> None:
    margin = float(_s(style, "margin", 50))
    font = str(_s(style, "font_name", "Helvetica"))
    label_size = float(_s(style, "label_size", 14))
    body_size = float(_s(style, "body_size", 12))

    canv.setFillColor(rgb_color(theme.primary))
    canv.setFont(font, label_size)
    canv.drawString(margin, _baseline(ph, y, font, label_size), label)

    canv.setFillColor(rgb_color(_s(style, "ink_color", "#333333")))
    canv.setFont(font, body_size)
    canv.drawString(margin, _baseline(ph, y + 20, font, body_size), value)


def _page_contact(
    canv: canvas.Canvas,
    content: ContentRecord,
    theme: ColorTheme,
    style: dict,
    pw: float,
    ph: float,
    arg: Optional[datetime] = None,
) -> None:
    margin = float(_s(style, "margin", 50))
    font = str(_s(style, "font_name", "Helvetica"))
    _draw_header_band(canv, style, theme, "CONTACT INFORMATION", pw, ph)

    contact_y = 120.0
    _draw_labelled(canv, style, theme, "Email:", content.email, contact_y, ph)
    contact_y += 50

    if content.location:
        _draw_labelled(canv, style, theme, "Location:", content.location, contact_y, ph)
        contact_y += 50

    if content.phone:
        _draw_labelled(canv, style, theme, "Phone:", content.phone, contact_y, ph)
        contact_y += 50

    links = content.populated_links()
    if links:
        label_size = float(_s(style, "label_size", 14))
        canv.setFillColor(rgb_color(theme.primary))
        canv.setFont(font, label_size)
        canv.drawString(margin, _baseline(ph, contact_y, font, label_size), "Connect Online:")
        contact_y += 25

        body_size = float(_s(style, "body_size", 12))
        canv.setFillColor(rgb_color(_s(style, "link_color", "#0066cc")))
        canv.setFont(font, body_size)
        for platform, url in links:
            canv.drawString(margin, _baseline(ph, contact_y, font, body_size), f"{platform[:1].upper()}{platform[1:]}: {url}")
            contact_y += 20

    stamp = arg or datetime.now()
    footer_size = float(_s(style, "footer_size", 8))
    canv.setFillColor(rgb_color(_s(style, "footer_color", "#666666")))
    canv.setFont(font, footer_size)
    canv.drawCentredString(
        pw / 2,
        _baseline(ph, ph - 30, font, footer_size),
        f"Generated by {PLATFORM_NAME} • {stamp.month}/{stamp.day}/{stamp.year}",
    )


PageRenderer = Callable[..., None]

PAGE_RENDERERS: Dict[str, PageRenderer] = {
    "cover": _page_cover,
    "about": _page_about,
    "section": _page_section,
    "skills": _page_skills,
    "contact": _page_contact,
}


def build_recipe(content: ContentRecord, generated_at: Optional[datetime] = None) -> List[Tuple[str, Any]]:
    """Page plan: cover, about (if bio), one per section, skills (if any), contact.

    Each entry is ``(page_id, arg)``; sections carry their index and the
    contact page carries the footer timestamp.
    """
    recipe: List[Tuple[str, Any]] = [("cover", None)]
    if content.about_me:
        recipe.append(("about", None))
    recipe.extend(("section", index) for index in range(len(content.sections)))
    if content.skills:
        recipe.append(("skills", None))
    recipe.append(("contact", generated_at))
    return recipe


def render_pdf(
    content: ContentRecord,
    theme: Optional[ColorTheme],
    sink: BinaryIO,
    generated_at: Optional[datetime] = None,
) -> None:
    """Draw the portfolio page by page into ``sink`` (any writable binary file object)."""
    style = load_style_preset()
    theme = theme or resolve_theme()

    canv = canvas.Canvas(sink, pagesize=PAGE_SIZE, invariant=1)
    canv.setTitle(content.portfolio_title or content.name)
    canv.setAuthor(content.name)
    canv.setSubject("Professional Portfolio")
    canv.setCreator(PLATFORM_NAME)
    pw, ph = PAGE_SIZE

    for page_id, arg in build_recipe(content, generated_at):
        PAGE_RENDERERS[page_id](canv, content, theme, style, pw, ph, arg)
        canv.showPage()

    canv.save()
