"""
Renderer command line construction.

Builds the argument vector for:

    <binpath> [--copies N] --orientation <o> --page-size <s> [--toc] [--grayscale]
              --title <title> <scratch-file> -

The trailing "-" makes the renderer write the PDF to stdout. Arguments are
handed to the OS as a list, so titles containing quotes or shell
metacharacters reach the renderer verbatim.
"""

from pathlib import Path
from typing import List, Union

from wkpdf.contexts.rendering.config import RenderConfig
from wkpdf.contexts.rendering.exceptions import ConfigurationError

STDOUT_TARGET = "-"
HELP_FLAG = "--extended-help"


def build_arguments(config: RenderConfig, scratch_path: Union[str, Path]) -> List[str]:
    """
    Build the renderer arguments (without the executable) for a config.

    Raises:
        ConfigurationError: If no title has been set
    """
    if not config.title:
        raise ConfigurationError("Title is not set")

    args: List[str] = []

    if config.copies > 1:
        args += ["--copies", str(config.copies)]

    args += ["--orientation", config.orientation.value]
    args += ["--page-size", config.page_size]

    if config.toc:
        args.append("--toc")
    if config.grayscale:
        args.append("--grayscale")

    args += ["--title", config.title]
    args.append(str(scratch_path))
    args.append(STDOUT_TARGET)

    return args


def build_command(config: RenderConfig, scratch_path: Union[str, Path]) -> List[str]:
    """Full argument vector: executable followed by build_arguments()."""
    return [config.binpath] + build_arguments(config, scratch_path)


def build_help_command(binpath: str) -> List[str]:
    return [binpath, HELP_FLAG]
