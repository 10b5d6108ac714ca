# src/ventthirds/cli.py
import click
import subprocess
import sys
from pathlib import Path

from .config import DEFAULT_CONFIG
from .core import compute_volumetric_thirds, load_selection
from .errors import ThirdsError


@click.group()
def cli():
    """Volumetric-thirds thresholding tools"""
    pass


@cli.command("thirds")
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.argument("structure", type=click.Path(exists=True, dir_okay=False))
@click.option("--id", "structure_id", default=None, help="Structure name shown in the report.")
@click.option("--lower-fraction", type=float, default=None, help="Split between lower and middle third (default 0.33).")
@click.option("--upper-fraction", type=float, default=None, help="Split between middle and upper third (default 0.66).")
@click.option("--precision", type=int, default=None, help="Decimal places of reported thresholds (default 0).")
@click.option("--keep-non-positive", is_flag=True, help="Keep voxels with values <= 0 in the analysis.")
@click.option("--html", "html_path", default=None, type=click.Path(dir_okay=False),
              help="Also write a histogram preview to this HTML file.")
@click.option("--quiet", is_flag=True, help="Only print the report.")
def thirds(image, structure, structure_id, lower_fraction, upper_fraction, precision,
           keep_non_positive, html_path, quiet):
    """Report intensity thresholds splitting STRUCTURE into volumetric thirds of IMAGE.

    IMAGE is an .npz file holding an 'image' array (Z, Y, X) with optional
    'spacing', 'origin', 'slope' and 'intercept'; STRUCTURE is a closed
    surface mesh in the same world coordinates.
    """
    config = DEFAULT_CONFIG.with_overrides(
        lower_fraction=lower_fraction,
        upper_fraction=upper_fraction,
        precision=precision,
        exclude_non_positive=False if keep_non_positive else None,
    )
    try:
        selection = load_selection(image, structure, structure_id)
    except ValueError as e:
        raise click.ClickException(str(e))
    try:
        run = compute_volumetric_thirds(selection, config, verbose=not quiet)
    except ThirdsError as e:
        raise click.ClickException(str(e))

    click.echo(run.report)
    if html_path:
        from .viewer import save_histogram_html
        save_histogram_html(run.values, run.result, run.structure_id, html_path=html_path)


@cli.command("example")
@click.argument("name")
def example(name):
    """Run an example script located in the repository `examples/` directory.

    Pass the script basename (e.g. `demo_sphere`).
    """
    # src/ventthirds/cli.py -> project root is parents[2]
    examples_dir = Path(__file__).resolve().parents[2] / "examples"
    if not examples_dir.exists():
        raise click.ClickException(f"Examples directory not found: {examples_dir}")

    script_name = name if name.endswith(".py") else f"{name}.py"
    script_path = examples_dir / script_name
    if not script_path.exists():
        avail = sorted(p.stem for p in examples_dir.glob("*.py"))
        raise click.ClickException(f"Example not found: {script_name}\nAvailable: {', '.join(avail)}")

    click.echo(f"Running Python example: {script_path}")
    try:
        subprocess.run([sys.executable, str(script_path)], check=True)
    except subprocess.CalledProcessError as e:
        raise click.ClickException(f"Example script failed with exit code {e.returncode}")


if __name__ == "__main__":
    cli()
