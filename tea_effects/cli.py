"""
Tea effect engine: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging (stderr, so stdout stays machine-readable).
  3. Build the engine / load reference tables.
  4. Report the result to stdout.

Install and run::

    pip install -e .
    tea-effects --help
    tea-effects validate-config
    tea-effects list-effects
    tea-effects analyze --file samples/teas.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="tea-effects",
    help="Tea effect profile engine: score teas from reference tables.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from tea_effects.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config) -> None:
    """Set up logging from config."""
    from tea_effects.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_engine_or_exit(config):
    """Load reference tables and build the engine, exiting on bad configuration."""
    from tea_effects.config import ConfigurationError
    from tea_effects.engine import TeaEffectEngine

    try:
        return TeaEffectEngine.from_config(config)
    except ConfigurationError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration and the reference tables it points at.

    Exits with code 1 if either fails validation.
    """
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    engine = _build_engine_or_exit(config)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Reference tables: {config.data.reference_dir or '(bundled)'}")
    typer.echo(f"  Effects:          {len(engine.tables.effects)}")
    typer.echo(f"  Interaction rules:{len(engine.rules)}")
    typer.echo(
        "  Weights:          "
        + ", ".join(f"{name}={weight:g}" for name, weight in engine.weights.items())
    )
    typer.echo(f"  Priority:         {', '.join(engine.priority)}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list-effects")
def list_effects(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """List the effect vocabulary with descriptions and legacy aliases."""
    from tea_effects.config import ConfigurationError
    from tea_effects.reference.loader import load_reference_tables

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        tables = load_reference_tables(config.data.reference_dir)
    except ConfigurationError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    for name, definition in tables.effects.items():
        aliases = f"  (replaces: {', '.join(definition.aliases)})" if definition.aliases else ""
        typer.echo(f"{definition.display_name:<12} {definition.description}{aliases}")


@app.command("analyze")
def analyze(
    tea_file: str = typer.Option(
        ...,
        "--file",
        "-f",
        help="Path to a JSON file holding one tea record or a list of them.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Calculate effect profiles and print them as JSON.

    A single record prints one result object; a list prints a list.
    """
    from pydantic import ValidationError

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    path = Path(tea_file)
    if not path.exists():
        typer.echo(f"[ERROR] Tea file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] Invalid JSON in {path}: {exc}", err=True)
        raise typer.Exit(code=1)

    engine = _build_engine_or_exit(config)
    records = payload if isinstance(payload, list) else [payload]

    try:
        results = [engine.calculate(record).model_dump(mode="json") for record in records]
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid tea record: {exc}", err=True)
        raise typer.Exit(code=1)

    output = results if isinstance(payload, list) else results[0]
    typer.echo(json.dumps(output, indent=2))
