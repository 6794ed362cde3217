"""blamediff CLI — git diff filter annotating each line with its originating commit."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import List, Optional, TextIO

import typer
from rich.console import Console

from blamediff import __version__

app = typer.Typer(
    name="blamediff",
    help="git diff filter annotating each line with the commit that last touched it.",
    add_completion=False,
)

console = Console(stderr=True)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from blamediff.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _utf8(stream: TextIO) -> TextIO:
    """Pass undecodable bytes through unchanged instead of failing."""
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(encoding="utf-8", errors="surrogateescape")
    return stream


def _version_callback(value: bool) -> None:
    if value:
        print(f"blamediff {__version__}")
        raise typer.Exit()


@app.command(
    context_settings={"allow_interspersed_args": False, "ignore_unknown_options": True},
)
def annotate(
    inner: Optional[List[str]] = typer.Argument(
        None, help="Inner diff filter to run, followed by its arguments"
    ),
    back_to: Optional[List[str]] = typer.Option(
        None, "--back-to", "-b", metavar="COMMIT",
        help="Blame up to the common ancestor with COMMIT (repeatable, first divergent wins)",
    ),
    format: Optional[str] = typer.Option(
        None, "--format", "-f", metavar="FORMAT-STRING",
        help="Print the referenced commits to stderr using a git pretty format",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Plain commit summary"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .blamediff.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """Read a unified diff on stdin and write it annotated with blame to stdout."""
    from blamediff.annotator.engine import DiffAnnotator
    from blamediff.annotator.pipeline import PipelineError, annotate_diff
    from blamediff.annotator.summary import write_candidate_summary
    from blamediff.config.loader import ConfigError, load_config
    from blamediff.git.adapter import GitBackend, GitError
    from blamediff.git.blame import BlameResolver
    from blamediff.git.diff_parser import DiffParseError
    from blamediff.logging_utils import configure_logging

    repo_root = _resolve_repo_root()

    # --- Load config ---
    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    if back_to:
        cfg.annotate.back_to = list(back_to)
    if inner:
        cfg.annotate.inner = list(inner)
    if format:
        cfg.summary.format = format
    if no_color:
        cfg.summary.color = False

    level = "DEBUG" if debug else "INFO" if verbose else cfg.logging.level
    configure_logging(level)

    reader = _utf8(sys.stdin)
    writer = _utf8(sys.stdout)
    backend = GitBackend(repo_root)

    try:
        resolver = BlameResolver(backend, cfg.annotate.back_to)
        annotator = DiffAnnotator(resolver, cfg.annotate.old_prefixes)
        annotate_diff(annotator, reader, writer, cfg.annotate.inner or None)
        writer.flush()
        if cfg.summary.format:
            write_candidate_summary(
                backend,
                annotator.candidates,
                cfg.summary.format,
                sys.stderr,
                color=cfg.summary.color,
            )
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except DiffParseError as exc:
        console.print(f"[bold red]Diff error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except PipelineError as exc:
        console.print(f"[bold red]Filter error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except OSError as exc:
        console.print(f"[bold red]I/O error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def main() -> None:
    app()
