from __future__ import annotations

from pathlib import Path

import pytest

from katika import config
from katika.pipeline import run
from katika.pipeline.render_preview import page_count
from katika.pipeline.run import GenerationError, generate_html, generate_pdf
from katika.storage import FileSink, document_filename, portfolio_output_dir


def _local_path(url: str) -> Path:
    return config.UPLOAD_DIR / url.removeprefix("/uploads/")


def test_generate_pdf_writes_and_records(store, portfolio, monkeypatch) -> None:
    monkeypatch.setattr(config, "RENDER_PREVIEWS", True)
    generated = generate_pdf(portfolio.id, store)

    path = _local_path(generated.url)
    assert path.exists()
    assert generated.size == path.stat().st_size > 0
    assert generated.filename.startswith(f"portfolio-{portfolio.id}-")
    assert path.with_suffix(".png").exists()
    # cover, about, two sections, skills, contact
    assert page_count(path) == 6
    assert [g.filename for g in store.list_generated_files(portfolio.id)] == [generated.filename]


def test_regenerating_gives_distinct_files(store, portfolio, monkeypatch) -> None:
    monkeypatch.setattr(config, "RENDER_PREVIEWS", False)
    first = generate_pdf(portfolio.id, store)
    second = generate_pdf(portfolio.id, store)
    assert first.filename != second.filename
    assert _local_path(first.url).exists()
    assert _local_path(second.url).exists()
    assert len(store.list_generated_files(portfolio.id)) == 2


def test_overwrite_policy_reuses_filename(store, portfolio, monkeypatch) -> None:
    monkeypatch.setattr(config, "RENDER_PREVIEWS", False)
    monkeypatch.setattr(config, "FILENAME_POLICY", "overwrite")
    first = generate_pdf(portfolio.id, store)
    second = generate_pdf(portfolio.id, store)
    assert first.filename == second.filename == f"portfolio-{portfolio.id}.pdf"
    assert sorted(p.name for p in portfolio_output_dir().iterdir()) == [first.filename]


def test_filename_policy_setter_rejects_unknown(monkeypatch) -> None:
    monkeypatch.setattr(config, "FILENAME_POLICY", "timestamp")
    with pytest.raises(ValueError):
        config.set_filename_policy("append")
    assert document_filename(7, "html", policy="overwrite") == "portfolio-7.html"


def test_generate_html_uses_portfolio_template(store, portfolio) -> None:
    generated = generate_html(portfolio.id, store)
    html = _local_path(generated.url).read_text(encoding="utf-8")
    assert generated.format == "html"
    assert 'class="template-modern"' in html
    assert "--primary: #112233;" in html
    assert ">Experience</h2>" in html
    assert "Resident singer at Jazz Loft" in html


def test_sink_failure_is_reported_and_leaves_no_partial_file(store, portfolio, monkeypatch) -> None:
    def broken_render(content, theme, sink, generated_at=None):  # noqa: ARG001 - test helper
        sink.write(b"%PDF-1.4 partial")
        raise OSError("disk full")

    monkeypatch.setattr(run, "render_pdf", broken_render)
    with pytest.raises(GenerationError, match="disk full"):
        generate_pdf(portfolio.id, store)

    assert list(portfolio_output_dir().iterdir()) == []
    assert store.list_generated_files(portfolio.id) == []


def test_preview_failure_still_records_pdf(store, portfolio, monkeypatch, caplog) -> None:
    def broken_preview(path):  # noqa: ARG001 - test helper
        raise RuntimeError("preview broke")

    monkeypatch.setattr(config, "RENDER_PREVIEWS", True)
    monkeypatch.setattr(run, "render_cover_preview", broken_preview)
    generated = generate_pdf(portfolio.id, store)

    path = _local_path(generated.url)
    assert path.exists()
    assert not path.with_suffix(".png").exists()
    assert [g.filename for g in store.list_generated_files(portfolio.id)] == [generated.filename]
    assert "Cover preview failed" in caplog.text


def test_unknown_portfolio_raises_lookup_error(store) -> None:
    with pytest.raises(LookupError):
        generate_pdf(999, store)
    with pytest.raises(LookupError):
        generate_html(999, store)


def test_file_sink_renames_on_close(tmp_path) -> None:
    target = tmp_path / "doc.pdf"
    sink = FileSink(target)
    sink.write(b"abc")
    sink.write(b"def")
    assert not target.exists()
    assert sink.close() == 6
    assert target.read_bytes() == b"abcdef"
    assert not (tmp_path / "doc.pdf.part").exists()


def test_file_sink_discards_on_error(tmp_path) -> None:
    target = tmp_path / "doc.html"
    with pytest.raises(RuntimeError):
        with FileSink(target) as sink:
            sink.write(b"<html>")
            raise RuntimeError("boom")
    assert list(tmp_path.iterdir()) == []
