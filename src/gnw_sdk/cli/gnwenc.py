"""
gnwenc - GNW Image Builder Command-Line Interface
=================================================

This module implements the command-line interface for building and
inspecting .gnw firmware images.

Commands
--------
- **build**: Encode images for the devices selected from a manifest
- **list**: List the devices a filter selects
- **info**: Show the decoded header and block sizes of an image

Directory Layout
----------------
For a device with id ``gnw_ball`` the build command reads:

    <renders>/gnw_ball/background.png
    <renders>/gnw_ball/mask.png
    <renders>/gnw_ball/mask_ids.png
    <assets>/gnw_ball/<rom file>

Usage Examples
--------------
Build every device that has render output and assets:
    $ gnwenc build manifest.json --renders renders/ --assets assets/ -o out/

Build one device:
    $ gnwenc build manifest.json -r renders/ -a assets/ -o out/ --device gnw_ball

Build the devices the emulation core supports, Nintendo only:
    $ gnwenc build manifest.json -r renders/ -a assets/ -o out/ --supported --company nintendo

Inspect an image:
    $ gnwenc info out/Ball.gnw
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from gnw_sdk import __version__
from gnw_sdk.cli.errors import ExitCode, handle_cli_exception
from gnw_sdk.config import EncoderConfig
from gnw_sdk.errors import GnwError
from gnw_sdk.gnw import DEFAULT_RASTER_SIZE, GnwParser, ImageBuilder
from gnw_sdk.platform import CPUType, PlatformSpecification, SUPPORTED_CPUS, load_manifest
from gnw_sdk.rendered import load_rendered

logger = logging.getLogger(__name__)

# Companies whose manifest entries also appear under another label
COMPANY_ALIASES = {
    "elektronika": ("elektronika", "bootleg (elektronika)"),
}


# =============================================================================
# Parameter Types and Helpers
# =============================================================================

class CPUChoice(click.ParamType):
    """
    Click parameter type for CPU selection.

    Accepts manifest names such as SM510, SM5a or SM510Tiger
    (case-insensitive).
    """
    name = "cpu"

    def convert(self, value: str, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> CPUType:
        """Convert string to CPUType."""
        if isinstance(value, CPUType):
            return value
        try:
            return CPUType.from_name(value)
        except ValueError:
            self.fail(
                f"Invalid CPU '{value}'. "
                f"Choose from: {', '.join(cpu.manifest_name for cpu in CPUType)}",
                param, ctx
            )


CPU = CPUChoice()


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def select_platforms(
    platforms: dict[str, PlatformSpecification],
    device: Optional[str] = None,
    cpu: Optional[CPUType] = None,
    supported: bool = False,
    companies: tuple[str, ...] = (),
) -> list[tuple[str, PlatformSpecification]]:
    """
    Pick devices from a manifest.

    Args:
        platforms: All manifest entries keyed by device id
        device: Select only this device id
        cpu: Select only devices with this CPU
        supported: Select only CPUs the emulation core runs
        companies: Company name prefixes (case-insensitive); any match keeps
            the device. Empty keeps every company.

    Returns:
        (device id, platform) pairs sorted by id
    """
    if device is not None:
        name = device.strip()
        selected = [(name, platforms[name])] if name in platforms else []
    else:
        selected = sorted(platforms.items())
        if cpu is not None:
            selected = [(n, p) for n, p in selected if p.device.cpu == cpu]
        if supported:
            selected = [(n, p) for n, p in selected if p.device.cpu in SUPPORTED_CPUS]

    if companies:
        prefixes = []
        for company in companies:
            key = company.strip().lower()
            prefixes.extend(COMPANY_ALIASES.get(key, (key,)))
        selected = [
            (n, p) for n, p in selected
            if p.metadata.company.lower().startswith(tuple(prefixes))
        ]

    return selected


def filter_options(func):
    """Device selection options shared by build and list."""
    func = click.option(
        "--company", "companies",
        multiple=True,
        help="Only devices from this company (prefix, repeatable)",
    )(func)
    func = click.option(
        "--supported",
        is_flag=True,
        help="Only CPUs the emulation core supports (SM510, SM510 Tiger, SM5a)",
    )(func)
    func = click.option(
        "--cpu",
        type=CPU,
        default=None,
        help="Only devices using this CPU",
    )(func)
    func = click.option(
        "-d", "--device",
        default=None,
        help="Only this device id",
    )(func)
    return func


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="gnwenc")
def main() -> None:
    """
    GNW firmware image builder.

    Encode rendered Game & Watch artwork and ROMs into .gnw images.

    \b
    Commands:
      build   Encode images for devices in a manifest
      list    List devices selected by a filter
      info    Show details of a .gnw image

    \b
    Examples:
      gnwenc build manifest.json -r renders/ -a assets/ -o out/
      gnwenc list manifest.json --supported
      gnwenc info out/Ball.gnw
    """
    pass


# =============================================================================
# Build Command
# =============================================================================

@main.command("build")
@click.argument(
    "manifest",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-r", "--renders",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Directory with one render output directory per device",
)
@click.option(
    "-a", "--assets",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Directory with one asset (ROM) directory per device",
)
@click.option(
    "-o", "--output",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Output directory for .gnw images",
)
@click.option(
    "--revision",
    default=None,
    help="Build revision to stamp into headers (default: $GNW_BUILD_REVISION)",
)
@click.option(
    "-i", "--installed",
    is_flag=True,
    help="Skip devices without render output or assets instead of failing",
)
@filter_options
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def cmd_build(
    manifest: Path,
    renders: Path,
    assets: Path,
    output: Path,
    revision: Optional[str],
    installed: bool,
    device: Optional[str],
    cpu: Optional[CPUType],
    supported: bool,
    companies: tuple[str, ...],
    verbose: bool,
) -> None:
    """
    Encode .gnw images for devices listed in MANIFEST.

    Each device is encoded independently; a failing device is reported
    and the build moves on. Without a device, CPU or --supported filter,
    devices that are not installed are skipped (as with --installed).

    \b
    Examples:
      gnwenc build manifest.json -r renders/ -a assets/ -o out/
      gnwenc build manifest.json -r renders/ -a assets/ -o out/ -d gnw_ball
    """
    setup_logging(verbose)

    try:
        platforms = load_manifest(manifest)
    except Exception as e:
        handle_cli_exception(e, verbose, "Manifest")

    config = EncoderConfig.from_env()
    if revision:
        config.build_revision = revision

    # Without an explicit selection, only build what is installed
    if device is None and cpu is None and not supported:
        installed = True

    selected = select_platforms(platforms, device, cpu, supported, companies)
    if not selected:
        click.echo("No manifest listings for selected devices found")
        return

    success_count = fail_count = skip_count = 0

    for name, platform in selected:
        click.echo("-" * 25)
        click.echo(f"Processing device {click.style(name, fg='green')}")

        render_dir = renders / name
        asset_dir = assets / name
        missing = [str(p) for p in (render_dir, asset_dir) if not p.is_dir()]
        if missing:
            message = f"Missing {', '.join(missing)}"
            if installed:
                click.echo(message)
                click.echo(click.style(f"Skipping device {name}: Not installed", fg="red"))
                skip_count += 1
            else:
                click.echo(message, err=True)
                click.echo(click.style(f"Failing device {name}", fg="red"), err=True)
                fail_count += 1
            continue

        try:
            rendered = load_rendered(render_dir)
            path = ImageBuilder(platform, rendered, asset_dir, config).build_to_file(output)
        except (GnwError, FileNotFoundError) as e:
            click.echo(str(e), err=True)
            click.echo(click.style(f"Failing device {name}", fg="red"), err=True)
            fail_count += 1
            continue

        click.echo(f"Successfully created device {click.style(name, fg='green')} at {path}")
        success_count += 1

    click.echo("-" * 25)
    click.echo(
        f"Total: {len(selected)}, Success: {success_count}, "
        f"Fail: {fail_count}, Skip: {skip_count}"
    )

    if fail_count:
        sys.exit(ExitCode.BUILD_ERROR)


# =============================================================================
# List Command
# =============================================================================

@main.command("list")
@click.argument(
    "manifest",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@filter_options
def cmd_list(
    manifest: Path,
    device: Optional[str],
    cpu: Optional[CPUType],
    supported: bool,
    companies: tuple[str, ...],
) -> None:
    """
    List devices in MANIFEST selected by the filters.

    \b
    Output format:
      ID           CPU         Company     Name
      gnw_ball     SM5a        Nintendo    Game & Watch: Ball
    """
    try:
        platforms = load_manifest(manifest)
    except Exception as e:
        handle_cli_exception(e, error_type="Manifest")

    selected = select_platforms(platforms, device, cpu, supported, companies)

    click.echo(f"{'ID':<16} {'CPU':<16} {'Company':<24} Name")
    click.echo("-" * 72)
    for name, platform in selected:
        click.echo(
            f"{name:<16} {platform.device.cpu.manifest_name:<16} "
            f"{platform.metadata.company:<24} {platform.metadata.name}"
        )
    click.echo(f"\n{len(selected)} devices")


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--width",
    type=click.IntRange(1, 1023),
    default=DEFAULT_RASTER_SIZE,
    show_default=True,
    help="Raster width the image was built with",
)
@click.option(
    "--height",
    type=click.IntRange(1, 1023),
    default=DEFAULT_RASTER_SIZE,
    show_default=True,
    help="Raster height the image was built with",
)
def cmd_info(image: Path, width: int, height: int) -> None:
    """
    Show the decoded header and block sizes of a .gnw IMAGE.

    \b
    Example:
      gnwenc info out/Ball.gnw
    """
    try:
        info = GnwParser.from_file(image, width=width, height=height).get_info()
    except Exception as e:
        handle_cli_exception(e)

    click.echo(f"Image: {image}")
    click.echo(f"  Format version: {info['version']}")
    click.echo(f"  CPU:            {info['cpu']}")
    click.echo(f"  Screen:         {info['screen_type']}, "
               f"{info['screen_width']}x{info['screen_height']}")
    ground = info["ground_last_index"]
    click.echo(f"  Ground index:   {'unset' if ground is None else f'S{ground}'}")
    click.echo(f"  Revision:       {info['revision'] or 'unknown'}")
    click.echo(f"  Raster:         {info['raster']}")
    click.echo(f"  Mask entries:   {info['mask_entries']} "
               f"({info['mask_bytes_used']}/{info['mask_capacity']} bytes)")
    click.echo(f"  ROM size:       {info['rom_size']} bytes")
    click.echo(f"  Total size:     {info['total_size']} bytes")


if __name__ == "__main__":
    main()
