"""rubydiff CLI - structural diff of Ruby sources."""

from __future__ import annotations

from pathlib import Path

import click
import structlog
from rich.console import Console

from rubydiff.cli.render import render_json, render_text
from rubydiff.config import load_config
from rubydiff.config.models import RubyDiffConfig
from rubydiff.core.errors import RubyDiffError
from rubydiff.core.logging import configure_logging, get_log_file_path
from rubydiff.sources import model_from_paths, model_from_revision
from rubydiff.structure import StructureModel

log = structlog.get_logger(__name__)


class DiffFailed(click.ClickException):
    """Raised for errors; exit code 1 is reserved for 'changes found'."""

    exit_code = 2


@click.group()
@click.version_option(version="0.1.0", prog_name="rubydiff")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .rubydiff/config.yaml (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_root: Path | None) -> None:
    """rubydiff - compare the structure of two versions of Ruby code."""
    try:
        config = load_config(config_root)
    except RubyDiffError as e:
        raise DiffFailed(str(e)) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("diff")
@click.argument("old")
@click.argument("new")
@click.option("--git", "use_git", is_flag=True, help="Treat OLD and NEW as git revisions")
@click.option(
    "--repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Repository for --git",
)
@click.option("-p", "--path", "pathspecs", multiple=True, help="Restrict --git to these paths")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
)
@click.option("--all", "show_unchanged", is_flag=True, help="Also list unchanged declarations")
@click.pass_context
def diff_command(
    ctx: click.Context,
    old: str,
    new: str,
    use_git: bool,
    repo: Path,
    pathspecs: tuple[str, ...],
    output_format: str,
    show_unchanged: bool,
) -> None:
    """Show structural changes from OLD to NEW.

    OLD and NEW are Ruby files or directories, or git revisions with --git.
    Exits 0 when nothing changed, 1 when changes were found.
    """
    config: RubyDiffConfig = ctx.obj["config"]

    try:
        before = _load(old, config, use_git=use_git, repo=repo, pathspecs=pathspecs)
        after = _load(new, config, use_git=use_git, repo=repo, pathspecs=pathspecs)
    except RubyDiffError as e:
        log.error("load_failed", error=e.error_name, details=e.details)
        raise DiffFailed(_with_log_pointer(str(e))) from e

    changes = before.diff(after)

    if output_format == "json":
        click.echo(render_json(changes, show_unchanged=show_unchanged))
    else:
        render_text(changes, Console(), show_unchanged=show_unchanged)

    if changes.has_changes:
        ctx.exit(1)


def _with_log_pointer(message: str) -> str:
    log_file = get_log_file_path()
    if log_file is None:
        return message
    return f"{message}. See {log_file} for details."


def _load(
    source: str,
    config: RubyDiffConfig,
    *,
    use_git: bool,
    repo: Path,
    pathspecs: tuple[str, ...],
) -> StructureModel:
    if use_git:
        return model_from_revision(repo, source, config=config, pathspecs=pathspecs)
    return model_from_paths([Path(source)], config=config, name=source)


if __name__ == "__main__":
    cli()
