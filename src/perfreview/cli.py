"""Typer CLI entrypoint for the batch review pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .logging import LOG_FORMATS, configure_logging
from .pipeline import AuditLogger
from .schemas.config import load_config

app = typer.Typer(help="Performance review scoring CLI.")


@app.command()
def run(
    submissions: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Submissions JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    log_format: str = typer.Option("json", help="Log renderer: json or console."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Score and classify evaluation submissions."""
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(f"Invalid config: {exc}", param_name="config") from exc

    if log_format not in LOG_FORMATS:
        raise typer.BadParameter(f"Expected one of {', '.join(LOG_FORMATS)}", param_name="log_format")
    configure_logging(log_level, log_format)

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    results = pipeline.run(
        submissions_path=submissions,
        output_path=output,
        audit_logger=audit_logger,
    )
    typer.echo(f"Processed {len(results)} submissions. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
