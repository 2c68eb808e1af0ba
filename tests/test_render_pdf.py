from __future__ import annotations

from datetime import datetime
import io

import fitz  # PyMuPDF

from katika.pipeline.content import ContentRecord, Section
from katika.pipeline.render_pdf import build_recipe, layout_chips, render_pdf
from katika.pipeline.theme import resolve_theme


STAMP = datetime(2025, 3, 7, 12, 0, 0)


def _record(**overrides) -> ContentRecord:
    fields = {
        "name": "Ama K.",
        "email": "ama@x.com",
        "category": "musician",
        "experience_level": "advanced",
        "city": "Accra",
        "country": "Ghana",
        "about_me": "Vocalist and guitarist.",
        "skills": ("vocals", "guitar"),
        "social_links": {"instagram": "https://instagram.com/ama", "website": ""},
        "portfolio_title": "Live Sessions",
        "sections": (Section(type="gallery", title="Gallery", content="Photos."), Section(type="press")),
    }
    fields.update(overrides)
    return ContentRecord(**fields)


def _render(record: ContentRecord) -> bytes:
    buffer = io.BytesIO()
    render_pdf(record, resolve_theme({"colors": {"primary": "#112233"}}), buffer, generated_at=STAMP)
    return buffer.getvalue()


def _pages_text(data: bytes) -> list[str]:
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [doc.load_page(i).get_text() for i in range(doc.page_count)]


def _expected_pages(record: ContentRecord) -> int:
    return 1 + (1 if record.about_me else 0) + len(record.sections) + (1 if record.skills else 0) + 1


def test_page_count_matches_recipe() -> None:
    for record in (
        _record(),
        _record(about_me="", skills=()),
        _record(sections=()),
        _record(about_me="", sections=(), skills=()),
    ):
        pages = _pages_text(_render(record))
        assert len(pages) == _expected_pages(record) == len(build_recipe(record))


def test_recipe_carries_section_index_and_timestamp() -> None:
    assert build_recipe(_record(), STAMP) == [
        ("cover", None),
        ("about", None),
        ("section", 0),
        ("section", 1),
        ("skills", None),
        ("contact", STAMP),
    ]
    assert build_recipe(_record(about_me="", sections=(), skills=()))[-1] == ("contact", None)


def test_page_order_and_labels() -> None:
    pages = _pages_text(_render(_record(description="Highlights from two seasons.", phone="+233 20 000 0000")))
    assert "Ama K." in pages[0]
    assert "Highlights from two seasons." in pages[0]
    assert "MUSICIAN" in pages[0]
    assert "ADVANCED LEVEL" in pages[0]
    assert "Live Sessions" in pages[0]
    assert "ABOUT THE ARTIST" in pages[1]
    assert "GALLERY" in pages[2] and "Photos." in pages[2]
    assert "PRESS" in pages[3]
    assert "SKILLS & SPECIALTIES" in pages[4] and "vocals" in pages[4]
    contact = pages[5]
    assert "CONTACT INFORMATION" in contact
    assert "ama@x.com" in contact
    assert "Accra, Ghana" in contact
    assert "Phone:" in contact and "+233 20 000 0000" in contact
    assert "Instagram: https://instagram.com/ama" in contact
    assert "Website:" not in contact
    assert "3/7/2025" in contact


def test_cover_defaults_without_category_or_experience() -> None:
    pages = _pages_text(_render(_record(category="", experience_level="")))
    assert "CREATIVE PROFESSIONAL" in pages[0]
    assert "LEVEL" not in pages[0]


def test_contact_without_links_skips_connect_block() -> None:
    pages = _pages_text(_render(_record(social_links={})))
    assert "Connect Online" not in pages[-1]
    assert "Phone:" not in pages[-1]


def test_long_text_continues_on_next_page() -> None:
    record = _record(about_me=" ".join(["rehearsal"] * 3000), sections=(), skills=())
    pages = _pages_text(_render(record))
    assert len(pages) > _expected_pages(record)
    assert "CONTACT INFORMATION" in pages[-1]


def test_render_is_deterministic_for_fixed_timestamp() -> None:
    assert _render(_record()) == _render(_record())


def test_chips_wrap_in_input_order() -> None:
    chips = layout_chips(["aaaa", "bbbbbbb", "cc", "d"], measure=lambda s: len(s) * 10, page_width=300)
    assert [c.label for c in chips] == ["aaaa", "bbbbbbb", "cc", "d"]
    assert [(c.x, c.top) for c in chips] == [(50, 120), (120, 120), (50, 155), (100, 155)]
    assert [c.width for c in chips] == [60, 90, 40, 30]
    right = 300 - 50
    for chip in chips:
        if chip.x > 50:
            assert chip.x + chip.width <= right


def test_oversized_chip_does_not_leave_empty_row() -> None:
    chips = layout_chips(["x" * 50, "y"], measure=lambda s: len(s) * 10, page_width=300)
    assert (chips[0].x, chips[0].top) == (50, 120)
    assert (chips[1].x, chips[1].top) == (50, 155)
