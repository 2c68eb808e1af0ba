from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from . import config
from .models import init_db, reset_engine
from .pipeline.content import content_from_mapping
from .pipeline.render_preview import page_count
from .pipeline.run import GenerationError, generate_html, generate_pdf, write_html, write_pdf
from .store import SqlPortfolioStore

app = typer.Typer(help="Artist portfolio backend and document generator")


@app.callback()
def main(
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory (database + uploads)"),
    filename_policy: Optional[str] = typer.Option(None, "--filename-policy", help="timestamp | overwrite"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if out:
        config.set_out_dir(out)
        reset_engine()
    if filename_policy:
        try:
            config.set_filename_policy(filename_policy)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc


@app.command("init-db")
def init_database() -> None:
    init_db()
    typer.echo(f"Database ready at {config.DB_PATH}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host"),
    port: int = typer.Option(3000, "--port"),
    reload: bool = typer.Option(False, "--reload"),
) -> None:
    import uvicorn

    uvicorn.run("katika.api:create_app", factory=True, host=host, port=port, reload=reload)


@app.command()
def render(
    input_path: Path = typer.Option(..., "--input", help="JSON file with portfolio content"),
    fmt: str = typer.Option("pdf", "--format", help="html or pdf"),
    template: Optional[str] = typer.Option(None, "--template", help="modern | classic | artistic"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
) -> None:
    """Render a portfolio straight from a JSON file, without the database."""
    if not input_path.exists():
        raise typer.BadParameter(f"Input not found: {input_path}")
    data = json.loads(input_path.read_text(encoding="utf-8"))
    content = content_from_mapping(data)
    if not content.name or not content.email:
        raise typer.BadParameter("Input must include name and email")
    customizations = data.get("customizations") or data.get("colors")

    if fmt == "html":
        target = output or input_path.with_suffix(".html")
        size = write_html(content, template or data.get("template"), customizations, target)
        typer.echo(f"Wrote {target} ({size} bytes)")
    elif fmt == "pdf":
        target = output or input_path.with_suffix(".pdf")
        size = write_pdf(content, customizations, target)
        typer.echo(f"Wrote {target} ({size} bytes, {page_count(target)} pages)")
    else:
        raise typer.BadParameter("--format must be html or pdf")


@app.command()
def generate(
    portfolio_id: int = typer.Option(..., "--portfolio-id"),
    fmt: str = typer.Option("pdf", "--format", help="html or pdf"),
) -> None:
    """Generate a stored portfolio's document, as the API does."""
    if fmt not in ("html", "pdf"):
        raise typer.BadParameter("--format must be html or pdf")
    store = SqlPortfolioStore()
    runner = generate_html if fmt == "html" else generate_pdf
    try:
        generated = runner(portfolio_id, store)
    except LookupError as exc:
        typer.echo(f"NOT FOUND: {exc}")
        raise typer.Exit(code=1)
    except GenerationError as exc:
        typer.echo(f"FAILED: {exc}")
        raise typer.Exit(code=2)
    typer.echo(f"READY: {generated.url} ({generated.size} bytes)")


if __name__ == "__main__":
    app()
