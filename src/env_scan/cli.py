from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from .env_file import EnvFile
from .scanner import ScanReport, scan_files
from .sync import SyncOutcome, sync_env

app = typer.Typer(add_completion=False, help="env-scan - keep .env in sync with the variables your code reads")

_FORMATS = ("text", "json", "yaml")


def _root(ctx: typer.Context) -> Path:
    ctx.ensure_object(dict)
    root = ctx.obj.get("root")
    if root is None:
        root = Path.cwd()
    return root


def _default_env_file() -> Optional[Path]:
    value = os.environ.get("ENV_SCAN_ENV_FILE")
    return Path(value) if value else None


def _patterns(values: List[str]) -> Optional[List[str]]:
    return list(values) if values else None


def _warn(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW, err=True)


def _echo_report(report: ScanReport) -> None:
    for error in report.errors:
        _warn(f"warning: {error}")
    if not report.files:
        typer.secho("\nNo environment variables found in your codebase.", fg=typer.colors.YELLOW)
        return
    names = report.all_env_vars
    typer.echo(f"\n{len(names)} unique environment variables found in {len(report.files)} files")
    typer.secho("\nEnvironment variables found in files:", fg=typer.colors.YELLOW)
    for path, found in report.files.items():
        typer.secho(f"  {path}:", fg=typer.colors.CYAN)
        typer.echo(f"    {', '.join(found)}")


def _echo_sync(outcome: SyncOutcome, dry_run: bool) -> None:
    result = outcome.result
    if result.error:
        _warn(f"warning: could not update {outcome.env_file.path}: {result.error}")
        return
    if not result.added:
        typer.echo("No new environment variables to add.")
        return
    if dry_run:
        typer.echo(f"Would add {len(result.added)} environment variables to {outcome.env_file.path}:")
    else:
        typer.echo(f"Added {len(result.added)} environment variables to {outcome.env_file.path}:")
    for name in result.added:
        typer.echo(f"  + {name}")


def _run_sync(
    ctx: typer.Context,
    env_file: Optional[Path],
    include: List[str],
    exclude: List[str],
    dry_run: bool,
) -> SyncOutcome:
    root = _root(ctx)
    target = env_file or _default_env_file()
    typer.secho("env-scan - Environment Variables Scanner", fg=typer.colors.BLUE)
    outcome = sync_env(
        root,
        target,
        include=_patterns(include),
        exclude=_patterns(exclude),
        dry_run=dry_run,
    )
    path = outcome.env_file.path
    if outcome.create_error:
        _warn(f"warning: could not create {path}: {outcome.create_error}")
    elif outcome.created and dry_run:
        typer.secho(f"{path} does not exist yet", fg=typer.colors.YELLOW)
    elif outcome.created:
        typer.secho(f"Created new {path}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Found existing {path}", fg=typer.colors.GREEN)
    typer.echo(f"Found {outcome.existing_count} existing environment variables")
    _echo_report(outcome.report)
    typer.echo("")
    _echo_sync(outcome, dry_run)
    return outcome


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(None, help="Directory to scan (defaults to cwd)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every scanned file"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"root": root}
    if ctx.invoked_subcommand is None:
        _run_sync(ctx, None, [], [], dry_run=False)


@app.command()
def scan(
    ctx: typer.Context,
    include: List[str] = typer.Option([], "--include", "-i", help="Glob pattern to scan (repeatable)"),
    exclude: List[str] = typer.Option([], "--exclude", "-x", help="Directory name to skip (repeatable)"),
    fmt: str = typer.Option("text", "--format", "-f", help="Output format: text, json or yaml"),
    output: Optional[Path] = typer.Option(None, help="Write JSON snapshot"),
) -> None:
    """List environment variable references without touching .env."""
    if fmt not in _FORMATS:
        raise typer.BadParameter(f"Unknown format '{fmt}'; choose from {', '.join(_FORMATS)}")
    report = scan_files(_root(ctx), include=_patterns(include), exclude=_patterns(exclude))
    data = report.as_dict()
    if output:
        output.write_text(json.dumps(data, indent=2), encoding="utf-8")
        typer.echo(f"Snapshot saved to {output}")
        return
    if fmt == "json":
        typer.echo(json.dumps(data, indent=2))
        return
    if fmt == "yaml":
        typer.echo(yaml.safe_dump(data, sort_keys=False).rstrip())
        return
    _echo_report(report)
    names = report.all_env_vars
    if names:
        typer.echo("\nAll unique variables:")
        for name in names:
            typer.echo(f"  - {name}")


@app.command()
def sync(
    ctx: typer.Context,
    env_file: Optional[Path] = typer.Option(None, help="Store path (defaults to env ENV_SCAN_ENV_FILE or <root>/.env)"),
    include: List[str] = typer.Option([], "--include", "-i", help="Glob pattern to scan (repeatable)"),
    exclude: List[str] = typer.Option([], "--exclude", "-x", help="Directory name to skip (repeatable)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report missing names without writing"),
) -> None:
    """Append every referenced but undeclared variable to .env."""
    outcome = _run_sync(ctx, env_file, include, exclude, dry_run)
    if outcome.result.written:
        typer.secho("\nDone! Your .env file is now in sync with your codebase.", fg=typer.colors.GREEN)


@app.command()
def check(
    ctx: typer.Context,
    env_file: Optional[Path] = typer.Option(None, help="Store path (defaults to env ENV_SCAN_ENV_FILE or <root>/.env)"),
    include: List[str] = typer.Option([], "--include", "-i", help="Glob pattern to scan (repeatable)"),
    exclude: List[str] = typer.Option([], "--exclude", "-x", help="Directory name to skip (repeatable)"),
) -> None:
    """Exit with status 1 when .env is missing any referenced variable."""
    root = _root(ctx)
    target = env_file or _default_env_file()
    store = EnvFile(target) if target else EnvFile.in_directory(root)
    report = scan_files(root, include=_patterns(include), exclude=_patterns(exclude))
    missing = store.missing(report.all_env_vars)
    if not missing:
        typer.echo(f"{store.path} declares all {len(report.all_env_vars)} referenced variables")
        return
    typer.secho(f"{store.path} is missing {len(missing)} variables:", fg=typer.colors.RED)
    for name in missing:
        typer.echo(f"  - {name}")
    raise typer.Exit(1)


def main() -> None:
    app()
