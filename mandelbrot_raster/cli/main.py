"""
Command-line entry point for Mandelbrot rendering.

Renders one fixed view to ``figures/mandelbrot.png`` in the working
directory. Only logging verbosity can be changed from the command line.
"""

import click
import sys
import logging
from pathlib import Path

from .. import __version__
from ..api import MandelbrotRenderer, RenderConfig
from ..core.exceptions import MandelbrotError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("figures") / "mandelbrot.png"

DEFAULT_CONFIG = RenderConfig(
    width=800,
    height=600,
    max_iterations=100,
    density=2.0,
    dpi=300,
)


def run(output: Path = DEFAULT_OUTPUT, config: RenderConfig = DEFAULT_CONFIG) -> None:
    """Render ``config`` and write it to ``output``."""
    MandelbrotRenderer(config).export(output)


@click.command()
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
def main(version, verbose, quiet):
    """
    Render the Mandelbrot set to figures/mandelbrot.png.

    The image is 1600x1200 pixels (800x600 at density 2.0), 100 iterations
    per pixel, 300 dpi. The figures directory must already exist.
    """
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"mandelbrot-raster v{__version__}")
        click.echo(f"Python: {sys.version}")
        sys.exit(0)

    try:
        run(DEFAULT_OUTPUT, DEFAULT_CONFIG)
    except MandelbrotError as e:
        logger.error(f"Render failed: {e}")
        if verbose:
            logger.exception("Traceback")
        sys.exit(1)


if __name__ == '__main__':
    main()
