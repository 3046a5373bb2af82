# ABOUTME: Loading named keyboard layout definitions from JSON files
import json
from pathlib import Path
from typing import Any, Iterable, List, Union
import logging

from .heatmap import Layout, LayoutKey
from .utils import BUNDLED_LAYOUTS_DIR


class LayoutLoadError(Exception):
    """A layout definition is missing, unreadable or malformed."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Error loading layout JSON for {name}: {reason}")
        self.name = name
        self.reason = reason


def layout_path(name: str, directory: Union[str, Path] = BUNDLED_LAYOUTS_DIR) -> Path:
    """Resolve a layout identifier to its stored definition."""
    return Path(directory) / f"{name}.json"


def parse_layout(name: str, data: Any) -> Layout:
    """Build a layout from a list of ``{key, x, y}`` records."""
    if not isinstance(data, list):
        raise LayoutLoadError(name, "expected a list of key records")

    keys = []
    for index, record in enumerate(data):
        try:
            keys.append(
                LayoutKey(
                    key=str(record["key"]),
                    x=float(record["x"]),
                    y=float(record["y"]),
                )
            )
        except (TypeError, KeyError, ValueError) as e:
            raise LayoutLoadError(name, f"bad key record at index {index}: {e!r}") from e
    return Layout(name=name, keys=tuple(keys))


def load_layout(name: str, directory: Union[str, Path] = BUNDLED_LAYOUTS_DIR) -> Layout:
    """Load one layout by name, raising LayoutLoadError on failure."""
    path = layout_path(name, directory)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise LayoutLoadError(name, f"{path} not found") from None
    except (OSError, json.JSONDecodeError) as e:
        raise LayoutLoadError(name, str(e)) from e

    layout = parse_layout(name, data)
    logging.info(f"Layout {name} loaded: {len(layout.keys)} keys")
    return layout


def load_layouts(
    names: Iterable[str], directory: Union[str, Path] = BUNDLED_LAYOUTS_DIR
) -> List[Layout]:
    """Load layouts in order, omitting any that cannot be loaded."""
    layouts = []
    for name in names:
        try:
            layouts.append(load_layout(name, directory))
        except LayoutLoadError as e:
            logging.warning(str(e))
    return layouts
