"""
Command-line interface for weldest.

Commands:
- nozzle: Estimate a single nozzle weld from command-line geometry
- job: Estimate every item of a job YAML file and print the project rollup
- settings: Write the default process settings as YAML

Usage:
    weldest nozzle --od 300 --thickness 25 --layer GTAW:0 --layer SMAW:6
    weldest job vessel.yaml --settings shop.yaml
    weldest settings -o shop.yaml
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import click
import yaml

from .engine.errors import EstimationError, InvalidConfiguration
from .engine.item import WeldItem
from .engine.settings import DEFAULT_SETTINGS, WeldSettings
from .summary import ProjectSummary, summarize_module, summarize_project
from .welds import ITEM_TYPES, NozzleItem, PipeJointSettings
from .welds.nozzle import NozzleJointType

# =============================================================================
# HELPERS
# =============================================================================


def _load_settings(path: Path | None) -> WeldSettings:
    if path is None:
        return DEFAULT_SETTINGS
    return WeldSettings.from_yaml(path)


def _parse_layer(text: str) -> tuple[str, float]:
    """Parse 'PROCESS:MIN_WIDTH' (e.g. 'SMAW:6')."""
    process, sep, width = text.partition(":")
    if not sep:
        raise click.BadParameter(f"Expected PROCESS:MIN_WIDTH, got {text!r}", param_hint="--layer")
    try:
        return process.strip(), float(width)
    except ValueError:
        raise click.BadParameter(f"Minimum width must be a number, got {width!r}", param_hint="--layer") from None


def load_job(data: Mapping[str, Any], settings: WeldSettings = DEFAULT_SETTINGS) -> dict[str, list[WeldItem]]:
    """
    Build weld items from job data.

    Job layout (every section optional):

        settings: {...}              # overrides --settings
        pipe_joint_presets: [...]
        nozzles: [{tag: N1, quantity: 2, geometry: {...}}, ...]
        long_seams: [...]
        circ_seams: [...]
        pipe_joints: [{nps: "4", schedule: SCH 80}, ...]

    Returns:
        Items keyed by module id, in report order
    """
    unknown = sorted(set(data) - set(ITEM_TYPES) - {"settings", "pipe_joint_presets"})
    if unknown:
        raise InvalidConfiguration(f"Unknown job sections: {unknown}", field="job")

    if "settings" in data:
        settings = WeldSettings.from_dict(data["settings"])
    pipe_settings = PipeJointSettings.from_dict(data)

    modules: dict[str, list[WeldItem]] = {}
    for module_id, item_type in ITEM_TYPES.items():
        rows = data.get(module_id) or []
        items = []
        for row in rows:
            if module_id == "pipe_joints":
                row = {"pipe_settings": pipe_settings, **row}
            items.append(item_type.from_dict(row, settings=settings))
        modules[module_id] = items
    return modules


def _echo_codes(codes: Mapping[str, float], indent: str = "  ") -> None:
    for code, hours in codes.items():
        click.echo(f"{indent}{code:<10} {hours:8.2f} h")


def _echo_project(project: ProjectSummary) -> None:
    click.echo(f"{'Module':<14} {'Welds':>6} {'Hours':>10}")
    click.echo("-" * 32)
    for module in project.modules:
        click.echo(f"{module.module_name:<14} {module.item_count:>6} {module.total_hours:>10.2f}")
    click.echo("-" * 32)
    click.echo(f"{'Total':<14} {project.item_count:>6} {project.total_hours:>10.2f}")

    if project.breakdown:
        click.echo("\nActivity breakdown:")
        for share in project.breakdown:
            click.echo(f"  {share.code:<10} {share.hours:8.2f} h  {share.percentage:5.1f}%")


# =============================================================================
# COMMANDS
# =============================================================================


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """weldest - weld labor estimates for pressure vessels."""
    pass


@cli.command()
@click.option("--od", type=float, default=300.0, show_default=True, help="Nozzle outside diameter (mm).")
@click.option("--thickness", type=float, default=25.0, show_default=True, help="Shell thickness (mm).")
@click.option(
    "--joint-type",
    type=click.Choice([t.value for t in NozzleJointType]),
    default=NozzleJointType.DOUBLE_BEVEL.value,
    show_default=True,
)
@click.option("--root-gap", type=float, default=3.0, show_default=True, help="Root gap (mm).")
@click.option("--root-face", type=float, default=2.0, show_default=True, help="Root face (mm).")
@click.option("--fillet-throat", type=float, default=6.0, show_default=True, help="Fillet throat (mm).")
@click.option("--inside-angle", type=float, default=35.0, show_default=True, help="Inside bevel angle (deg).")
@click.option("--outside-angle", type=float, default=15.0, show_default=True, help="Outside bevel angle (deg).")
@click.option("--split", type=float, default=70.0, show_default=True, help="Inside share of the bevel depth (%).")
@click.option("--single-angle", type=float, default=35.0, show_default=True, help="Single-bevel angle (deg).")
@click.option(
    "--layer", "layers",
    multiple=True,
    help="Inside process layer as PROCESS:MIN_WIDTH; repeat for each layer (default: GTAW:0 SMAW:6 FCAW:20).",
)
@click.option("--outside-process", default="FCAW", show_default=True)
@click.option("--fillet-process", default="FCAW", show_default=True)
@click.option("--quantity", "-q", type=int, default=1, show_default=True)
@click.option(
    "--settings", "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Process settings YAML (default: built-in settings).",
)
def nozzle(
    od: float,
    thickness: float,
    joint_type: str,
    root_gap: float,
    root_face: float,
    fillet_throat: float,
    inside_angle: float,
    outside_angle: float,
    split: float,
    single_angle: float,
    layers: tuple[str, ...],
    outside_process: str,
    fillet_process: str,
    quantity: int,
    settings_path: Path | None,
):
    """
    Estimate one nozzle weld.

    Example:
        weldest nozzle --od 450 --thickness 32 --layer GTAW:0 --layer FCAW:10
    """
    fields: dict[str, Any] = {
        "quantity": quantity,
        "geometry": {
            "nozzle_od": od,
            "shell_thickness": thickness,
            "joint_type": joint_type,
            "root_gap": root_gap,
            "root_face": root_face,
            "fillet_throat": fillet_throat,
            "inside_bevel_angle": inside_angle,
            "outside_bevel_angle": outside_angle,
            "split_ratio": split,
            "single_bevel_angle": single_angle,
        },
        "outside_process": outside_process,
        "fillet_process": fillet_process,
    }
    if layers:
        fields["inside_layers"] = [_parse_layer(text) for text in layers]

    try:
        item = NozzleItem.from_dict(fields, settings=_load_settings(settings_path))
    except EstimationError as e:
        raise click.ClickException(str(e)) from None

    results = item.results
    click.echo(f"Circumference: {results.circumference:.2f} mm")
    click.echo(
        f"Volume (mm3):  inside {results.volumes.inside:.0f}, outside {results.volumes.outside:.0f}, "
        f"fillet {results.volumes.fillet:.0f}, total {results.volumes.total:.0f}"
    )
    click.echo(
        f"Passes:        inside {results.passes.inside}, outside {results.passes.outside}, "
        f"fillet {results.passes.fillet}, total {results.passes.total}"
    )
    for i, zone in enumerate(results.zones, start=1):
        click.echo(
            f"  zone {i}: {zone.process.value:<5} {zone.start_width:6.2f}-{zone.end_width:6.2f} mm wide, "
            f"{zone.passes} passes, {zone.hours:.2f} h"
        )
    click.echo(
        f"Hours:         weld {results.times.weld:.2f}, activities {results.times.activities:.2f}, "
        f"total {results.times.total:.2f}"
    )
    click.echo("\nActivity codes (per weld):")
    _echo_codes(item.activity_codes)
    if item.quantity > 1:
        click.echo(f"\nTotal for {item.quantity} welds: {item.total_hours * item.quantity:.2f} h")


@cli.command()
@click.argument("job_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--settings", "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Process settings YAML (default: built-in settings).",
)
def job(job_file: Path, settings_path: Path | None):
    """
    Estimate every weld in a job file and print the project rollup.

    Example:
        weldest job vessel.yaml
    """
    with open(job_file) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise click.ClickException(f"{job_file}: {e}") from None
    if not isinstance(data, Mapping):
        raise click.ClickException(f"{job_file}: expected a mapping of module sections")

    try:
        modules = load_job(data, _load_settings(settings_path))
    except EstimationError as e:
        raise click.ClickException(str(e)) from None

    project = summarize_project(
        summarize_module(items, module_id, ITEM_TYPES[module_id].module_name)
        for module_id, items in modules.items()
    )
    _echo_project(project)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output YAML file path. If not specified, prints to stdout.",
)
def settings(output: Path | None):
    """Write the default process settings as YAML."""
    if output:
        DEFAULT_SETTINGS.to_yaml(output)
        click.echo(f"Settings saved to: {output}")
    else:
        click.echo(yaml.dump({"settings": DEFAULT_SETTINGS.to_dict()}, default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    cli()
