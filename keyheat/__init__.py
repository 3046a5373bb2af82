# ABOUTME: Package initialization for the key-log heatmap analyzer
"""
Key Log Heatmap Analyzer

Counts key events from whitespace-delimited key-press logs, ranks bigrams,
and colors keyboard layouts by how often each key was pressed.
"""

__version__ = "1.0.0"
__description__ = "Key event frequency, bigram and heatmap analysis for key-press logs"

from .analyzer import (
    SPECIAL_KEY_TABLE,
    KeyNormalizer,
    count_bigrams,
    count_frequencies,
    rank_bigrams,
    rank_frequencies,
    resolve_key_frequency,
    tokenize,
)
from .heatmap import (
    HslColor,
    Layout,
    LayoutKey,
    color_for_frequency,
    compose_layouts,
    get_color_strategy,
    hue_sweep,
    lightness_sweep,
)
from .layouts import LayoutLoadError, load_layout, load_layouts
from .session import AnalysisSession, dispatch
from .utils import ConfigManager

__all__ = [
    "SPECIAL_KEY_TABLE",
    "KeyNormalizer",
    "count_bigrams",
    "count_frequencies",
    "rank_bigrams",
    "rank_frequencies",
    "resolve_key_frequency",
    "tokenize",
    "HslColor",
    "Layout",
    "LayoutKey",
    "color_for_frequency",
    "compose_layouts",
    "get_color_strategy",
    "hue_sweep",
    "lightness_sweep",
    "LayoutLoadError",
    "load_layout",
    "load_layouts",
    "AnalysisSession",
    "dispatch",
    "ConfigManager",
]
