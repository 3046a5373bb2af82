# ABOUTME: Heat color scaling and multi-layout composition of render instructions
import math
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
import logging

from .analyzer import KeyNormalizer


@dataclass(frozen=True)
class HslColor:
    """A color in hue/saturation/lightness terms."""

    hue: int
    saturation: int
    lightness: int

    def css(self) -> str:
        return f"hsl({self.hue}, {self.saturation}%, {self.lightness}%)"


@dataclass(frozen=True)
class LayoutKey:
    """A printed key label and its position on the layout diagram."""

    key: str
    x: float
    y: float


@dataclass(frozen=True)
class Layout:
    """A named set of layout keys."""

    name: str
    keys: Tuple[LayoutKey, ...]


@dataclass(frozen=True)
class KeyRender:
    label: str
    x: float
    y: float
    frequency: int
    color: HslColor

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["color"] = self.color.css()
        return data


@dataclass(frozen=True)
class LayoutRender:
    """Everything an external renderer needs to draw one layout."""

    title: str
    title_x: float
    title_y: float
    max_frequency: int
    keys: Tuple[KeyRender, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "title_x": self.title_x,
            "title_y": self.title_y,
            "max_frequency": self.max_frequency,
            "keys": [key.to_dict() for key in self.keys],
        }


ColorStrategy = Callable[[float], HslColor]

# Title anchor relative to each layout's offset
TITLE_POSITION = (150, 30)
DEFAULT_OFFSET = (0, 300)
MAX_SCOPES = ("all", "layout")


def frequency_ratio(frequency: int, max_frequency: int) -> float:
    """Share of the maximum frequency, 0 when nothing was counted."""
    if max_frequency == 0:
        return 0
    return frequency / max_frequency


def hue_sweep(ratio: float) -> HslColor:
    """Blue (rare) to red (frequent)."""
    return HslColor(240 - math.floor(240 * ratio), 100, 50)


def lightness_sweep(ratio: float) -> HslColor:
    """Light pink (rare) to dark red (frequent)."""
    return HslColor(0, 100, 90 - math.floor(60 * ratio))


COLOR_STRATEGIES: Dict[str, ColorStrategy] = {
    "hue": hue_sweep,
    "lightness": lightness_sweep,
}


def get_color_strategy(name: str) -> ColorStrategy:
    """Look up a color scaling strategy by its configured name."""
    try:
        return COLOR_STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown color strategy {name!r}, expected one of {sorted(COLOR_STRATEGIES)}"
        ) from None


def color_for_frequency(
    frequency: int, max_frequency: int, strategy: ColorStrategy = lightness_sweep
) -> HslColor:
    return strategy(frequency_ratio(frequency, max_frequency))


def compose_layouts(
    layouts: Sequence[Layout],
    frequencies: Mapping[str, int],
    strategy: ColorStrategy = lightness_sweep,
    offset: Sequence[float] = DEFAULT_OFFSET,
    max_scope: str = "all",
    normalizer: Optional[KeyNormalizer] = None,
) -> List[LayoutRender]:
    """Turn layouts plus a frequency mapping into render instructions.

    Layout ``i`` is shifted by ``i * offset``. With ``max_scope="all"`` colors
    are scaled against the largest count in the whole mapping; with
    ``"layout"`` against the largest resolved count among that layout's keys.
    """
    if max_scope not in MAX_SCOPES:
        raise ValueError(f"Unknown max scope {max_scope!r}, expected one of {MAX_SCOPES}")

    normalizer = normalizer or KeyNormalizer()
    dx, dy = offset
    global_max = max(frequencies.values(), default=0)

    renders = []
    for index, layout in enumerate(layouts):
        shift_x, shift_y = index * dx, index * dy
        resolved = [(item, normalizer.resolve(item.key, frequencies)) for item in layout.keys]

        if max_scope == "layout":
            max_frequency = max((freq for _, freq in resolved), default=0)
        else:
            max_frequency = global_max

        keys = tuple(
            KeyRender(
                label=item.key,
                x=item.x + shift_x,
                y=item.y + shift_y,
                frequency=freq,
                color=color_for_frequency(freq, max_frequency, strategy),
            )
            for item, freq in resolved
        )
        renders.append(
            LayoutRender(
                title=layout.name.upper(),
                title_x=TITLE_POSITION[0] + shift_x,
                title_y=TITLE_POSITION[1] + shift_y,
                max_frequency=max_frequency,
                keys=keys,
            )
        )
        logging.debug(f"Composed layout {layout.name} with {len(keys)} keys")

    return renders
