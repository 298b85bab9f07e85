"""
Render option presets.

Presets are named bundles of render options kept in a YAML file, grouped by
category and flattened to "category_name" on load:

    layout:
      landscape_letter: {orientation: Landscape, page_size: Letter}
    print:
      draft: {grayscale: true}

Examples:
    # Apply multiple presets (later overrides earlier)
    >>> apply_presets({"path": "/tmp", "title": "T"}, ["layout_landscape_letter", "print_draft"])
"""

import os
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from omegaconf import OmegaConf

from wkpdf.contexts.rendering.config import OPTION_KEYS
from wkpdf.contexts.rendering.exceptions import ConfigurationError

load_dotenv()
RENDER_PRESETS_PATH = Path(
    os.getenv(
        "RENDER_PRESETS_PATH",
        Path(__file__).resolve().parents[2] / "configs" / "render_presets.yaml",
    )
)


def load_render_presets(config_path: Path = None) -> Dict[str, Dict[str, Any]]:
    """
    Load the presets YAML and flatten it to a single-level dict.

    Args:
        config_path: Optional path to presets file (defaults to RENDER_PRESETS_PATH)

    Returns:
        Dict mapping preset names to option dicts
        Example: {"layout_landscape_letter": {"orientation": "Landscape", ...}}

    Raises:
        ConfigurationError: If the file is missing or a preset uses unknown keys
    """
    config_path = Path(config_path or RENDER_PRESETS_PATH)
    if not config_path.exists():
        raise ConfigurationError(f"Presets file not found: {config_path}")

    nested = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}

    flattened = {}
    for category, presets in nested.items():
        for name, options in (presets or {}).items():
            options = options or {}
            unknown = set(options) - OPTION_KEYS
            if unknown:
                raise ConfigurationError(
                    f"Preset '{category}_{name}' uses unknown options: {sorted(unknown)}"
                )
            flattened[f"{category}_{name}"] = options

    return flattened


def apply_presets(
    options: Dict[str, Any],
    preset_names: List[str],
    config_path: Path = None,
) -> Dict[str, Any]:
    """
    Merge named presets underneath explicit options.

    Presets are applied in order, with later presets overriding earlier ones.
    Keys already present in options always win over presets.

    Args:
        options: Explicit render options
        preset_names: Preset names to apply (e.g., ["print_draft"])
        config_path: Optional path to presets file

    Returns:
        New options dict with presets applied

    Raises:
        ConfigurationError: If a preset is not found
    """
    if not preset_names:
        return dict(options)

    presets = load_render_presets(config_path)

    merged: Dict[str, Any] = {}
    for preset_name in preset_names:
        if preset_name not in presets:
            available = sorted(presets.keys())
            raise ConfigurationError(
                f"Preset '{preset_name}' not found. Available presets: {available}"
            )
        merged.update(presets[preset_name])

    merged.update(options)
    return merged
