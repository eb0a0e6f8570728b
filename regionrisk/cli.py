"""
cli.py
------
Command-line interface for the regionrisk SDK.

Entry point: ``regionrisk``

Commands
--------
* ``compute``          — load participant, expert and repeat-visit files, run
                         the engine, and print the per-region results.
* ``config show``      — print the active (default or loaded) configuration.
* ``config validate``  — check a configuration file and exit non-zero if invalid.

``compute`` flags
-----------------
* ``--config``         — YAML/JSON model configuration (default model if omitted).
* ``--region``         — restrict the computation to the given region(s).
* ``--output``         — output format: ``pretty`` (default) or ``json``.
* ``--export``         — write one row per region to a CSV file.
* ``--save-manifest``  — write the ExecutionManifest to a JSON file.
* ``--show-participants`` — list every participant's terms in the report.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import click

from regionrisk import __version__
from regionrisk.assessment.engine import RegionRiskEngine
from regionrisk.core.config import DEFAULT_CONFIG, RiskModelConfig, load_config
from regionrisk.core.config_hashing import compute_config_hash
from regionrisk.core.errors import RiskModelError
from regionrisk.core.models import RiskLabel
from regionrisk.core.result_schema import RegionRiskResult, RiskComputationResult
from regionrisk.ingestion.records import load_experts, load_participants, load_repeat_visits


# ---------------------------------------------------------------------------
# Helpers — rendering
# ---------------------------------------------------------------------------

_LABEL_COLOURS = {
    RiskLabel.VERY_HIGH: "red",
    RiskLabel.HIGH: "magenta",
    RiskLabel.MEDIUM: "yellow",
    RiskLabel.LOW: "cyan",
    RiskLabel.VERY_LOW: "green",
}


def _index_bar(value: float, width: int = 30) -> str:
    """Render a simple ASCII bar for a 0–1 risk index."""
    filled = int(round(value * width))
    bar = "█" * filled + "░" * (width - filled)
    return f"[{bar}] {value:.4f}"


def _label_style(label: RiskLabel) -> str:
    return click.style(label.value.upper(), fg=_LABEL_COLOURS[label], bold=True)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"\n✗  {message}", fg="red"), err=True)
    sys.exit(1)


def _resolve_config(config_path: Optional[str]) -> RiskModelConfig:
    if config_path is None:
        return DEFAULT_CONFIG
    try:
        return load_config(config_path)
    except (ValueError, FileNotFoundError) as exc:
        _fail(f"Could not load config: {exc}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__, prog_name="regionrisk", message="%(prog)s %(version)s")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log engine diagnostics to stderr.")
def cli(verbose: bool):
    """regionrisk — regional risk-intelligence engine."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# compute command
# ---------------------------------------------------------------------------

@cli.command()
@click.option(
    "--participants", "participants_path", required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Participant assessments (.json or long-format .csv).",
)
@click.option(
    "--experts", "experts_path", required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Expert assessments (.json or .csv); the latest per region is used.",
)
@click.option(
    "--repeat-visits", "repeat_visits_path", required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Repeat-visit ratios per region (.json mapping or .csv).",
)
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Risk model configuration (.yaml or .json). Defaults to the built-in model.",
)
@click.option(
    "--region", "regions", multiple=True,
    help="Only compute this region (repeatable).",
)
@click.option(
    "--output", "output_format",
    type=click.Choice(["pretty", "json"], case_sensitive=False),
    default="pretty", show_default=True,
    help="Output format: pretty (default) or json.",
)
@click.option(
    "--export", "export_path", default=None, type=click.Path(dir_okay=False),
    help="Write one row per region to this CSV file.",
)
@click.option(
    "--save-manifest", "manifest_path", default=None, type=click.Path(dir_okay=False),
    help="Write the ExecutionManifest to this JSON file.",
)
@click.option(
    "--show-participants", is_flag=True, default=False,
    help="List every participant's group terms in the pretty report.",
)
def compute(
    participants_path: str,
    experts_path: str,
    repeat_visits_path: str,
    config_path: Optional[str],
    regions: Tuple[str, ...],
    output_format: str,
    export_path: Optional[str],
    manifest_path: Optional[str],
    show_participants: bool,
):
    """
    Compute the risk index and label of every region with participants.

    \b
    Outputs:
      - Risk index (0–1) and label per region
      - Delta-risk, phi-risk, sense of safety, omega per region
      - (--show-participants) Per-participant group and risk terms
      - (--export) CSV table of region results
      - (--save-manifest) Manifest with config hash and run id
    """
    pretty = output_format == "pretty"
    config = _resolve_config(config_path)

    try:
        participants = load_participants(participants_path)
        experts = load_experts(experts_path)
        repeat_visits = load_repeat_visits(repeat_visits_path)
    except (ValueError, FileNotFoundError) as exc:
        _fail(f"Could not load input: {exc}")

    if pretty:
        click.echo(
            f"\n🔍  Loaded {len(participants):,} participant(s), "
            f"{len(experts)} expert assessment(s), {len(repeat_visits)} repeat-visit value(s)."
        )

    engine = RegionRiskEngine(config)
    try:
        outcome = engine.run(
            participants,
            experts,
            repeat_visits,
            region_ids=list(regions) or None,
        )
    except RiskModelError as exc:
        _fail(f"Computation failed: {exc}")

    if manifest_path:
        Path(manifest_path).write_text(outcome.manifest.to_json(), encoding="utf-8")
        if pretty:
            click.echo(f"📄  Manifest saved → {click.style(manifest_path, fg='cyan')}")

    if export_path:
        outcome.to_dataframe().to_csv(export_path, index=False)
        if pretty:
            click.echo(f"💾  Results exported → {click.style(export_path, fg='cyan')}")

    if not pretty:
        click.echo(outcome.to_json())
        return

    _print_risk_report(outcome, show_participants)


# ---------------------------------------------------------------------------
# config commands
# ---------------------------------------------------------------------------

@cli.group("config")
def config_group():
    """Inspect and validate risk model configurations."""


@config_group.command("show")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file to show. Defaults to the built-in model.",
)
def config_show(config_path: Optional[str]):
    """Print a configuration in wire format together with its hash."""
    config = _resolve_config(config_path)
    click.echo(json.dumps(
        {"config_hash": compute_config_hash(config), "config": config.to_dict()},
        indent=2,
    ))


@config_group.command("validate")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
def config_validate(config_path: str):
    """Validate CONFIG_PATH and exit with status 1 if it is unusable."""
    config = _resolve_config(config_path)
    click.echo(
        click.style("✓  Configuration is valid", fg="green", bold=True)
        + f"  hash={compute_config_hash(config)[:16]}…"
    )


# ---------------------------------------------------------------------------
# Report renderer
# ---------------------------------------------------------------------------

def _print_risk_report(outcome: RiskComputationResult, show_participants: bool) -> None:
    """Render a human-readable risk report to stdout."""
    w = 60
    divider = click.style("─" * w, fg="bright_black")

    click.echo(f"\n{divider}")
    click.echo(click.style("  REGIONAL RISK REPORT", bold=True, fg="bright_white"))
    click.echo(divider)
    manifest = outcome.manifest
    version = manifest.config_version if manifest.config_version is not None else "n/a"
    click.echo(f"  Run id        : {manifest.run_id}")
    click.echo(f"  Config version: {version}")
    click.echo(f"  Config hash   : {manifest.config_hash[:32]}…")
    click.echo(f"  Regions       : {len(outcome.results)}")

    if not outcome.results:
        click.echo(click.style("\n  No region has participant assessments.", fg="yellow"))
        click.echo(f"\n{divider}\n")
        return

    for result in outcome.results:
        _print_region(result, divider, show_participants)

    click.echo(f"\n{divider}\n")


def _print_region(result: RegionRiskResult, divider: str, show_participants: bool) -> None:
    d = result.diagnostics
    colour = _LABEL_COLOURS[result.risk_label]

    click.echo(f"\n{divider}")
    click.echo(
        click.style(f"  {result.region_id}", bold=True, fg="bright_white")
        + f"  ({d.sample_size} participant(s))"
    )
    click.echo(divider)
    click.echo(f"  Risk index      : {click.style(_index_bar(result.risk_index), fg=colour, bold=True)}")
    click.echo(f"  Risk label      : {_label_style(result.risk_label)}")
    click.echo(f"  Delta-risk      : {d.delta_risk:.4f}")
    click.echo(f"  Phi-risk        : {d.phi_risk:.4f}")
    click.echo(f"  Repeat visit    : {d.repeat_visit:.4f}")
    click.echo(f"  Sense of safety : {d.sense_of_safety:.4f}")
    click.echo(f"  Expert level    : {d.expert_safety_level.value}")
    click.echo(f"  Omega           : {d.omega:.4f}")

    if show_participants:
        for participant_id, trace in d.per_participant.items():
            terms = ", ".join(f"{g}={t.value}" for g, t in trace.group_terms.items())
            click.echo(
                f"    {participant_id:<20} {trace.individual_risk_term.value:<3} [{terms}]"
            )
