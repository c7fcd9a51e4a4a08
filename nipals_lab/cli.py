"""
cli.py - Rich Command Line Interface for nipals_lab

Usage:
    nipals-lab --help
    nipals-lab generate --batches 5 --replicates 6 --output peak_areas.csv
    nipals-lab fit peak_areas.csv --components 2 --scale --batch-column batch
    nipals-lab info pca_nipals_k2.npz --detailed
    nipals-lab version
"""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .errors import PCAError

# Initialize Typer app and Rich console
app = typer.Typer(
    name="nipals-lab",
    help="NIPALS PCA for chromatographic peak-area tables",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


# =============================================================================
# ENUMS FOR CLI OPTIONS
# =============================================================================

class Solver(str, Enum):
    """Available decomposition methods."""
    nipals = "nipals"
    svd = "svd"


class OutputFormat(str, Enum):
    """Output file formats."""
    npz = "npz"
    json = "json"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def configure_logging(verbose: bool) -> None:
    """Route loguru output to stderr at DEBUG (verbose) or WARNING level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="[{time:HH:mm:ss}] <level>{level: <8}</level> {message}",
    )


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


def print_result_summary(result, title: str = "PCA Summary"):
    """Print a rich summary of a PCA result."""
    table = Table(title=title, box=box.ROUNDED, show_header=False, title_style="bold cyan")
    table.add_column("Property", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Method", result.method.upper())
    table.add_row("Samples", str(result.n_samples))
    table.add_row("Variables", str(result.n_variables))
    table.add_row("Components", str(result.n_comp))
    table.add_row("Scaling", "Autoscaled" if result.scaling.is_scaled else "Mean-centered")
    table.add_row("Cumulative Explained", f"{result.cumulative_variance[-1]:.1%}")
    if result.iterations:
        table.add_row("Iterations", ", ".join(str(i) for i in result.iterations))

    console.print(table)


def print_variance_table(result):
    """Per-component variance accounting."""
    table = Table(title="Explained Variance", box=box.SIMPLE)
    table.add_column("Component", style="cyan")
    table.add_column("Explained", justify="right")
    table.add_column("Residual", justify="right")
    table.add_column("Cumulative", justify="right")
    table.add_column("Bar", justify="left")

    for label, expl, resid, cum in zip(
        result.component_labels,
        result.explained_variance,
        result.residual_variance,
        result.cumulative_variance,
    ):
        bar = "[green]" + "█" * int(round(30 * expl)) + "[/green]"
        table.add_row(label, f"{expl:.2%}", f"{resid:.2%}", f"{cum:.2%}", bar)

    console.print(table)


def print_loadings_table(result):
    table = Table(title="Loadings", box=box.SIMPLE)
    table.add_column("Variable", style="cyan")
    for label in result.component_labels:
        table.add_column(label, justify="right")

    for name, row in zip(result.variable_labels, result.loadings):
        table.add_row(name, *[f"{v:+.3f}" for v in row])

    console.print(table)


def print_batch_scores(result, batches: pd.Series):
    """Mean score per batch, the table downstream ANOVA starts from."""
    scores = result.scores_frame()
    means = scores.groupby(batches.reindex(scores.index).values).mean()

    table = Table(title="Mean Scores by Batch", box=box.SIMPLE)
    table.add_column("Batch", style="cyan")
    for label in result.component_labels:
        table.add_column(label, justify="right")

    for batch, row in means.iterrows():
        table.add_row(str(batch), *[f"{v:+.3f}" for v in row])

    console.print(table)


# =============================================================================
# COMMANDS
# =============================================================================

@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    configure_logging(verbose)


@app.command()
def fit(
    input_file: Path = typer.Argument(..., help="CSV peak-area table (rows=samples, first column=sample id)"),
    components: int = typer.Option(2, "--components", "-k", help="Number of principal components"),
    scale: bool = typer.Option(False, "--scale/--no-scale", help="Autoscale columns to unit variance"),
    method: Solver = typer.Option(Solver.nipals, "--method", "-m", help="Decomposition method"),
    iterations: int = typer.Option(30, "--iterations", "-n", help="NIPALS refinements per component"),
    tol: Optional[float] = typer.Option(None, "--tol", help="Stop NIPALS early below this relative change"),
    batch_column: Optional[str] = typer.Option(None, "--batch-column", "-b", help="Column with batch labels"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path"),
    format: OutputFormat = typer.Option(OutputFormat.npz, "--format", "-f", help="Output format"),
):
    """
    Run PCA on a peak-area table.

    Example:
        nipals-lab fit peak_areas.csv -k 2 --scale --batch-column batch
    """
    from nipals_lab import NipalsConfig, compute_pca
    from nipals_lab.io import read_peak_table, save_result, ResultFormat

    console.print(Panel.fit("[bold]NIPALS PCA[/bold]", border_style="blue"))

    try:
        with console.status("[bold blue]Loading peak table..."):
            areas, batches = read_peak_table(input_file, batch_column=batch_column)
    except (FileNotFoundError, PCAError) as e:
        fail(str(e))

    console.print(
        f"  Loaded table: [cyan]{areas.shape[0]}[/cyan] samples × [cyan]{areas.shape[1]}[/cyan] variables"
    )

    try:
        config = NipalsConfig(n_iter=iterations, tol=tol) if method == Solver.nipals else None
        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
                      transient=True, console=console) as progress:
            progress.add_task(f"Extracting {components} components ({method.value})...", total=None)
            result = compute_pca(areas, components, scale=scale, method=method.value, config=config)
    except PCAError as e:
        fail(str(e))

    console.print("  [green]✓[/green] Decomposition complete\n")

    print_result_summary(result, title="Fitted PCA")
    print_variance_table(result)
    if batches is not None:
        print_batch_scores(result, batches)

    if output is None:
        output = Path(f"pca_{method.value}_k{components}.{format.value}")

    save_result(result, output, ResultFormat(format.value))
    console.print(f"\n  Saved to: [bold]{output}[/bold]")


@app.command()
def info(
    result_file: Path = typer.Argument(..., help="Saved PCA result (.npz or .json)"),
    detailed: bool = typer.Option(False, "--detailed", "-d", help="Show loadings"),
):
    """
    Display information about a saved PCA result.

    Example:
        nipals-lab info pca_nipals_k2.npz --detailed
    """
    from nipals_lab.io import load_result

    try:
        result = load_result(result_file)
    except (FileNotFoundError, ValueError) as e:
        fail(str(e))

    console.print(f"  File: [bold]{result_file}[/bold]\n")
    print_result_summary(result)
    print_variance_table(result)

    if detailed:
        print_loadings_table(result)


@app.command()
def generate(
    batches: int = typer.Option(5, "--batches", help="Number of production batches"),
    replicates: int = typer.Option(6, "--replicates", "-r", help="Samples per batch"),
    peaks: int = typer.Option(4, "--peaks", "-p", help="Number of integrated peaks"),
    batch_effect: float = typer.Option(0.15, "--batch-effect", help="Std dev of per-batch log shift"),
    noise: float = typer.Option(0.03, "--noise", help="Std dev of per-sample log noise"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output CSV path"),
):
    """
    Generate a synthetic peak-area table with a batch column.

    Example:
        nipals-lab generate --batches 5 --replicates 6 --seed 1 -o peak_areas.csv
    """
    from nipals_lab import simulate_peak_areas

    try:
        table = simulate_peak_areas(
            n_batches=batches,
            replicates=replicates,
            n_peaks=peaks,
            batch_effect=batch_effect,
            replicate_noise=noise,
            rng=np.random.default_rng(seed),
        )
    except PCAError as e:
        fail(str(e))

    if output is None:
        output = Path(f"peak_areas_b{batches}_r{replicates}.csv")

    table.with_batch_column("batch").to_csv(output)
    console.print(
        f"  [green]✓[/green] Wrote {len(table.areas)} samples × {peaks} peaks to [bold]{output}[/bold]"
    )


@app.command()
def version():
    """Show version information."""
    from nipals_lab import __version__

    console.print(Panel(
        f"[bold cyan]nipals_lab[/bold cyan] v{__version__}\n\n"
        "NIPALS principal component analysis for\n"
        "chemometric batch comparison.",
        border_style="cyan"
    ))


# =============================================================================
# ENTRY POINT
# =============================================================================

def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
