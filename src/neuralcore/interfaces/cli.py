"""neuralcore CLI.

Click-based command line interface. Each command builds a fresh engine,
ingests one batch file, and prints a report.

A batch file is a JSON object with optional ``kernels``, ``streams``,
``echoes`` and ``connections`` lists of records.

Usage:
    neuralcore ingest batch.json
    neuralcore ingest batch.json --seed 42 --steps 3 --json
    neuralcore export batch.json
    neuralcore feedback batch.json 12
    neuralcore settings --settings overrides.json
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError

from neuralcore.cortex import CerebralCortex
from neuralcore.settings import CortexSettings, load_settings, settings_as_sections

_BATCH_KEYS = ("kernels", "streams", "echoes", "connections")


def _json_out(data):
    """Print data as JSON."""
    click.echo(json.dumps(data, indent=2, default=str))


def _load_batch(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Read and shape-check a batch file."""
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a JSON object")

    batch = {}
    for key in _BATCH_KEYS:
        records = data.get(key, [])
        if not isinstance(records, list):
            raise click.ClickException(f"'{key}' in {path} must be a list")
        batch[key] = records
    return batch


def _build_settings(settings_path: Optional[Path], seed: Optional[int], steps: Optional[int]) -> CortexSettings:
    # options left unset on the command line must not mask the settings file
    overrides = {
        field: value
        for field, value in (("feature_seed", seed), ("propagation_steps", steps))
        if value is not None
    }
    try:
        return load_settings(settings_path, **overrides)
    except ValidationError as e:
        raise click.ClickException(f"Invalid settings: {e}")


def _run_batch(batch_path: Path, settings: CortexSettings) -> CerebralCortex:
    batch = _load_batch(batch_path)
    cortex = CerebralCortex(settings)
    try:
        cortex.ingest(**batch)
    except ValidationError as e:
        raise click.ClickException(f"Invalid record in {batch_path}: {e}")
    return cortex


_batch_argument = click.argument(
    "batch", type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
_settings_option = click.option(
    "--settings", "settings_path", type=click.Path(dir_okay=False, path_type=Path),
    help="Settings JSON file (defaults to $NEURALCORE_SETTINGS)",
)
_seed_option = click.option("--seed", type=int, help="Feature generator seed")


# =============================================================================
# Root group
# =============================================================================

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log ingestion details to stderr")
def cli(verbose):
    """neuralcore - activation-propagation graph engine."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        )


# =============================================================================
# Ingest
# =============================================================================

@cli.command()
@_batch_argument
@_settings_option
@_seed_option
@click.option("--steps", type=int, help="Propagation steps")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def ingest(batch, settings_path, seed, steps, as_json):
    """Ingest a batch file and print the resulting state."""
    cortex = _run_batch(batch, _build_settings(settings_path, seed, steps))
    state = cortex.state()

    if as_json:
        _json_out(state.model_dump(mode="json"))
        return

    click.echo("neuralcore State")
    click.echo("=" * 40)
    click.echo(f"  Core activation:    {state.activation:.4f}")
    click.echo(f"  Emergent state:     {state.emergent_state.name.value}")
    click.echo(f"  Resonance harmonic: {state.resonance_harmonic:.4f}")
    click.echo(f"  Network density:    {state.network_density:.4f}")
    click.echo(f"  Entanglement:       {state.entanglement:.4f}")
    click.echo(f"  Nodes:              {state.node_count}")
    click.echo(f"  Edges:              {state.edge_count}")

    if state.dominant_attractors:
        click.echo("\nDominant attractors:")
        for a in state.dominant_attractors:
            click.echo(f"  {a.label:25s} {a.activation:.4f}")


# =============================================================================
# Export
# =============================================================================

@cli.command()
@_batch_argument
@_settings_option
@_seed_option
def export(batch, settings_path, seed):
    """Ingest a batch file and print the display export as JSON."""
    cortex = _run_batch(batch, _build_settings(settings_path, seed, None))
    _json_out(cortex.export_for_display().to_dict())


# =============================================================================
# Feedback
# =============================================================================

@cli.command()
@_batch_argument
@click.argument("kernel_id")
@_settings_option
@_seed_option
def feedback(batch, kernel_id, settings_path, seed):
    """Ingest a batch file and describe one kernel's place in the graph."""
    cortex = _run_batch(batch, _build_settings(settings_path, seed, None))
    click.echo(cortex.kernel_feedback(kernel_id))


# =============================================================================
# Settings
# =============================================================================

@cli.command("settings")
@_settings_option
def show_settings(settings_path):
    """Print the effective settings as JSON."""
    _json_out(settings_as_sections(_build_settings(settings_path, None, None)))


if __name__ == "__main__":
    cli()
