"""CLI for the placement VIKOR engine.

Provides command-line interface for running placements from an input
file of already-normalized records.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .app_logging import setup_logging
from .config import find_config_file, load_config, save_default_config
from .engine import PlacementEngine, validate_input
from .errors import ValidationFailure, VikorError
from .exporter import export_csv, export_json
from .sample_data import sample_dataset
from .schema import VikorResult
from .validation import validate_thresholds

console = Console()


@click.group()
@click.version_option(version="1.0.0", prog_name="placement-vikor")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True),
    help="Path to vikor-config.yaml (default: auto-discovered)"
)
def main(config_path: Optional[str]):
    """VIKOR Placement Engine.

    Ranks internship placements for students against weighted
    benefit/cost criteria and allocates them under capacity limits.
    """
    path = Path(config_path) if config_path else find_config_file()
    if path:
        try:
            load_config(path)
        except (yaml.YAMLError, PydanticValidationError) as e:
            raise click.ClickException(f"Invalid configuration file {path}: {e}")


def load_input(path: str) -> dict:
    """Load a run input file (JSON or YAML)."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot read input file {path}: {e}")
    if not isinstance(data, dict):
        raise click.ClickException("Input file must contain an object with 'individuals' and 'alternatives'")
    # Accept the original field names as well
    if "individuals" not in data and "students" in data:
        data["individuals"] = data["students"]
    if "distance_overrides" not in data and "jarakPerSiswa" in data:
        data["distance_overrides"] = data["jarakPerSiswa"]
    return data


@main.command("run")
@click.option(
    "--input", "-i", "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Path to run input (JSON or YAML)"
)
@click.option(
    "--weights", "-w",
    help="Comma-separated weights for C1..C5 (overrides input file)"
)
@click.option(
    "--v-parameter", "-v", "v_parameter",
    type=float,
    help="Strategy parameter v in [0, 1] (overrides input file)"
)
@click.option("--c1-threshold", type=float, help="Minimum C1 score to qualify")
@click.option("--c4-threshold", type=float, help="Minimum C4 score to qualify")
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results"
)
@click.option(
    "--csv", "csv_out",
    type=click.Path(),
    help="Output file for CSV export"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed output and debug logging"
)
def run_cmd(
    input_path: str,
    weights: Optional[str],
    v_parameter: Optional[float],
    c1_threshold: Optional[float],
    c4_threshold: Optional[float],
    out: Optional[str],
    csv_out: Optional[str],
    json_output: bool,
    verbose: bool,
):
    """Run a placement from an input file.

    Examples:
        placement-vikor run -i input.json
        placement-vikor run -i input.yaml -w 0.3,0.2,0.1,0.25,0.15 -v 0.6
        placement-vikor run -i input.json --csv hasil_vikor.csv --verbose
    """
    if verbose:
        setup_logging("DEBUG")

    try:
        data = load_input(input_path)
        issues = validate_thresholds(data.get("thresholds"))
        if issues:
            raise ValidationFailure(issues, subject="batas minimum")
        file_thresholds = data.get("thresholds") or {}
        engine = PlacementEngine(
            c1_threshold=c1_threshold if c1_threshold is not None else file_thresholds.get("c1"),
            c4_threshold=c4_threshold if c4_threshold is not None else file_thresholds.get("c4"),
        )
        result = engine.run(
            data.get("individuals") or [],
            data.get("alternatives") or [],
            weights=weights if weights is not None else data.get("weights"),
            v=v_parameter if v_parameter is not None else data.get("v"),
            distance_overrides=data.get("distance_overrides"),
        )
    except ValidationFailure as e:
        console.print(f"[red]Error: validation failed ({len(e.messages)} issues)[/red]")
        for message in e.messages:
            console.print(f"  - {message}")
        sys.exit(1)
    except VikorError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if json_output:
        click.echo(result.model_dump_json(indent=2))
    else:
        display_result(result, verbose)

    if out:
        export_json(result, Path(out))
        if not json_output:
            console.print(f"\n[green]Results saved to {out}[/green]")
    if csv_out:
        export_csv(result, Path(csv_out))
        if not json_output:
            console.print(f"[green]CSV saved to {csv_out}[/green]")


@main.command("validate")
@click.option(
    "--input", "-i", "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Path to run input (JSON or YAML)"
)
def validate_cmd(input_path: str):
    """Validate an input file without scoring.

    Lists every issue found so they can be fixed in one pass.
    """
    data = load_input(input_path)
    is_valid, issues = validate_input(
        data.get("individuals") or [],
        data.get("alternatives") or [],
        weights=data.get("weights"),
        v=data.get("v"),
        distance_overrides=data.get("distance_overrides"),
        thresholds=data.get("thresholds"),
    )
    if is_valid:
        console.print(f"[green]✓ Input valid: {input_path}[/green]")
    else:
        console.print(f"[red]✗ Input invalid: {input_path}[/red]")
        for issue in issues:
            console.print(f"  - {issue}")

    sys.exit(0 if is_valid else 1)


@main.command("sample")
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Write the sample input to this file (default: stdout)"
)
def sample_cmd(out: Optional[str]):
    """Print or save the default sample dataset."""
    data = sample_dataset()
    content = json.dumps(data, indent=2, ensure_ascii=False)
    if out:
        path = Path(out)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        console.print(f"[green]Sample input saved to {out}[/green]")
    else:
        click.echo(content)


@main.command("init-config")
@click.option(
    "--out", "-o",
    default="vikor-config.yaml",
    type=click.Path(),
    help="Where to write the configuration file"
)
def init_config_cmd(out: str):
    """Write the default configuration to a YAML file."""
    save_default_config(Path(out))
    console.print(f"[green]Configuration written to {out}[/green]")


def display_result(result: VikorResult, verbose: bool):
    """Display a placement result in formatted text."""
    meta = result.metadata
    summary = result.summary

    console.print(Panel(
        f"Total: [bold]{meta.total_individuals}[/bold] | "
        f"Lolos: [green]{meta.qualified_count}[/green] | "
        f"Tidak lolos: [red]{meta.disqualified_count}[/red] | "
        f"Dialihkan: [yellow]{summary.displaced_count}[/yellow]\n"
        f"Bobot: {', '.join(f'{w:g}' for w in meta.weights)} | v = {meta.v_parameter:g} | "
        f"Batas C1 = {meta.thresholds.c1:g}, C4 = {meta.thresholds.c4:g}",
        title="Hasil VIKOR",
    ))

    if result.qualified:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Siswa", style="cyan")
        table.add_column("Rekomendasi")
        table.add_column("Q", justify="right")
        table.add_column("Kompromi")
        table.add_column("Penempatan")
        table.add_column("Catatan", style="yellow")

        for i, item in enumerate(result.qualified, 1):
            alloc = item.allocation
            placement = f"{alloc.assigned_name} ({alloc.assigned_code})" if alloc else "-"
            note = ""
            if alloc and alloc.over_capacity:
                note = "melebihi kapasitas"
            elif alloc and alloc.displaced:
                note = f"dialihkan dari {alloc.original_code}"
            table.add_row(
                str(i),
                item.individual.name,
                f"{item.recommendation.name} ({item.recommendation.code})",
                f"{item.recommendation.q:.4f}",
                item.compromise.conclusion.value,
                placement,
                note,
            )
        console.print(table)

    if verbose:
        for item in result.qualified:
            ranking = Table(title=item.individual.name, show_header=True, header_style="bold")
            ranking.add_column("Rank", justify="right")
            ranking.add_column("Kode")
            ranking.add_column("Nama")
            ranking.add_column("Jarak", justify="right")
            ranking.add_column("S", justify="right")
            ranking.add_column("R", justify="right")
            ranking.add_column("Q", justify="right")
            for alt in item.ranking:
                ranking.add_row(
                    str(alt.rank), alt.code, alt.name, f"{alt.distance:g}",
                    f"{alt.s:.4f}", f"{alt.r:.4f}", f"{alt.q:.4f}",
                )
            console.print(ranking)
            console.print(f"  [dim]{item.compromise.dq_formula or ''}[/dim]")
            console.print(f"  [dim]{item.compromise.condition1_formula}[/dim]")
            console.print(f"  [dim]{item.compromise.condition2_detail}[/dim]\n")

    if result.capacity_summary:
        capacity = Table(title="Kapasitas", show_header=True, header_style="bold")
        capacity.add_column("Kode")
        capacity.add_column("Nama")
        capacity.add_column("Terisi", justify="right")
        capacity.add_column("Kuota", justify="right")
        capacity.add_column("%", justify="right")
        for status in result.capacity_summary:
            capacity.add_row(
                status.code,
                status.name,
                str(status.used),
                "∞" if status.total is None else str(status.total),
                "-" if status.percentage is None else f"{status.percentage:.1f}",
            )
        console.print(capacity)

    if result.disqualified:
        console.print("\n[bold]Tidak Lolos:[/bold]")
        for item in result.disqualified:
            console.print(f"  [red]•[/red] {item.name}: {item.reason}")

    if result.warnings:
        console.print("\n[dim]Warnings:[/dim]")
        for warning in result.warnings:
            console.print(f"  [dim]• {warning}[/dim]")


if __name__ == "__main__":
    main()
