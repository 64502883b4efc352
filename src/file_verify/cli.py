# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/cli.py

"""Command line interface for file-verify."""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .errors import FileVerifyError
from .parser import load_index
from .progress import HashingProgress
from .splits import DEFAULT_SPLITS, compare_splits
from .stats import StatsSnapshot, VerificationStats
from .types import IndexedFileItem, Outcome, RunInfo, SplitComparisonResult
from .validator import DEFAULT_WORKERS, IndexVerifier, write_mismatch_report

app = typer.Typer(help="Verify files against a hash index and locate differences")
console = Console()
logger = logging.getLogger("file_verify")


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _log_outcome(item: IndexedFileItem, outcome: Outcome) -> None:
    if outcome != "ok":
        logger.info("%s: %s", outcome, item.path)


@app.command()
def verify(
    index: Path = typer.Argument(..., envvar="FILE_VERIFY_INDEX",
                                 help="Path to CLIXML hash index"),
    workers: int = typer.Option(DEFAULT_WORKERS, "--workers", "-w",
                                envvar="FILE_VERIFY_WORKERS",
                                help="Number of hashing threads"),
    mismatches: Path = typer.Option(Path("mismatches.txt"), "--mismatches", "-m",
                                    envvar="FILE_VERIFY_MISMATCHES",
                                    help="Where to write mismatched paths"),
    show_progress: bool = typer.Option(True, "--progress/--no-progress",
                                       help="Show a live progress bar"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output")
) -> None:
    """Re-hash every file in an index and report what no longer matches."""
    _configure_logging(debug)
    try:
        run, items = load_index(index)
        verifier = IndexVerifier(run.algorithm, workers, on_result=_log_outcome)
    except (FileVerifyError, OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _print_run_info(run, len(items))

    stats = VerificationStats(total=len(items), total_bytes=run.total_bytes)
    stats.start()
    if show_progress:
        with HashingProgress(stats, run.total_bytes, console=console) as bar:
            verifier.on_progress = bar.advance
            result = verifier.run(items, stats)
    else:
        result = verifier.run(items, stats)
    stats.stop()

    _print_stats(stats.snapshot())

    try:
        write_mismatch_report(mismatches, result.mismatches)
    except OSError as e:
        typer.echo(f"Error: cannot write {mismatches}: {e}", err=True)
        raise typer.Exit(1)

    console.print(f"\n[bold]Mismatched files:[/bold] {len(result.mismatches)}")
    for m in result.mismatches:
        console.print(f"  {escape(m.path)}")


@app.command()
def compare(
    files: list[Path] = typer.Argument(..., help="Two or more files to compare"),
    splits: int = typer.Option(DEFAULT_SPLITS, "--splits", "-n",
                               envvar="FILE_VERIFY_SPLITS",
                               help="Number of windows to split the overlap into"),
    algorithm: str = typer.Option("SHA256", "--alg", "-a",
                                  envvar="FILE_VERIFY_ALGORITHM",
                                  help="Hash algorithm (SHA256, SHA1, SHA512, SHA384, MD5)"),
    output_format: str = typer.Option("text", "--format", "-f",
                                      help="Output format: text, json"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output")
) -> None:
    """Find which byte ranges differ between copies of the same file."""
    _configure_logging(debug)
    if len(files) < 2:
        raise typer.BadParameter("need at least 2 files", param_hint="FILES")
    if output_format not in ("text", "json"):
        typer.echo(f"Unknown format: {output_format}", err=True)
        raise typer.Exit(1)

    try:
        result = compare_splits(files, splits, algorithm)
    except (FileVerifyError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if output_format == "json":
        typer.echo(json.dumps(result.as_dict(), indent=2))
    else:
        _print_split_report(result)


def _print_run_info(run: RunInfo, item_count: int) -> None:
    """Print the index header."""
    console.print("[bold]Index:[/bold]")
    console.print(f"  Algorithm: {escape(run.algorithm)}")
    for key in sorted(run.meta):
        if key == "algorithm":
            continue
        console.print(f"  {escape(key)}: {escape(str(run.meta[key]))}")
    console.print(f"  Items: {item_count:,}")
    console.print(f"  Bytes to hash: {run.total_bytes:,}\n")


def _print_stats(snap: StatsSnapshot) -> None:
    """Print the final counters."""
    table = Table(title="Verification Stats")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white", justify="right")

    rows = [
        ("duration_ms", snap.duration_ms),
        ("total", snap.total),
        ("processed", snap.processed),
        ("ok", snap.ok),
        ("skipped", snap.skipped),
        ("stat_errors", snap.stat_errors),
        ("size_mismatches", snap.size_mismatches),
        ("hash_errors", snap.hash_errors),
        ("hash_mismatches", snap.hash_mismatches),
        ("bytes_hashed", snap.bytes_hashed),
        ("bytes_stat_ok", snap.bytes_stat_ok),
        ("total_bytes", snap.total_bytes),
    ]
    for name, value in rows:
        table.add_row(name, str(value))

    bps = snap.throughput_bytes_per_sec
    if bps is not None:
        table.add_row("throughput_mb_per_sec", f"{bps / 1_000_000.0:.1f}")

    console.print(table)


def _print_split_report(result: SplitComparisonResult) -> None:
    """Print a split comparison in human-readable form."""
    console.print(f"Algorithm: {escape(result.algorithm)}")
    console.print(f"Splits:    {result.split_count}\n")

    console.print("[bold]Files:[/bold]")
    for i, (path, size) in enumerate(zip(result.paths, result.sizes)):
        console.print(f"  \\[{i}] {escape(path)} (size={size:,})")
    console.print()

    if result.min_size != result.max_size:
        console.print("[yellow]Size mismatch detected.[/yellow]")
        console.print(f"Overlap: {result.min_size:,} bytes")
        console.print(f"Max: {result.max_size:,} bytes\n")
        for i, tail in enumerate(result.tail_bytes):
            if tail > 0:
                console.print(f"  \\[{i}] extra tail: {tail:,} bytes")
        console.print()

    if result.identical:
        console.print("[green]Result: All splits match and sizes match "
                      "(files identical).[/green]")
        return

    if not result.differing_splits:
        console.print("[yellow]Result: All splits match over overlap; "
                      "only tails differ.[/yellow]")
        return

    table = Table(title="Differing Splits")
    table.add_column("Split", style="cyan")
    table.add_column("Bytes", style="yellow")
    table.add_column("File", style="green")
    table.add_column("Hash", style="magenta")
    for s in result.differing_splits:
        window = result.windows[s]
        for fi, path in enumerate(result.paths):
            table.add_row(
                str(s) if fi == 0 else "",
                f"{window.start:,}-{window.end:,}" if fi == 0 else "",
                Text(f"[{fi}] {path}"),
                result.split_hashes[s][fi],
            )
    console.print(f"[red]Differing splits:[/red] {list(result.differing_splits)}\n")
    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
