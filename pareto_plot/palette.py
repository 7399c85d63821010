from __future__ import annotations

from dataclasses import dataclass, field

from pareto_plot.config import is_hex_color


DEFAULT_COLORS: tuple[str, ...] = (
    "#118DFF",
    "#12239E",
    "#E66C37",
    "#6B007B",
    "#E044A7",
    "#744EC2",
    "#D9B300",
    "#D64550",
    "#197278",
    "#1AAB40",
)


@dataclass
class ColorPalette:
    """Category-keyed color assignment plus the high-contrast color pair.

    A key keeps the color it was first assigned for the palette's lifetime, so
    repeated updates with the same labels paint the same colors. Assignments
    are never evicted: labels that drop out of the data keep their slot, and the
    map grows with every distinct label the palette has seen. Use a fresh
    palette when the label set is unbounded.
    """

    colors: tuple[str, ...] = DEFAULT_COLORS
    foreground: str = "#000000"
    background: str = "#FFFFFF"
    is_high_contrast: bool = False
    _assigned: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("palette must contain at least one color")
        for color in (*self.colors, self.foreground, self.background):
            if not is_hex_color(color):
                raise ValueError(f"palette color must be a hex color: {color!r}")

    def get_color(self, key: str) -> str:
        color = self._assigned.get(key)
        if color is None:
            color = self.colors[len(self._assigned) % len(self.colors)]
            self._assigned[key] = color
        return color


def high_contrast_palette(*, foreground: str = "#FFFF00", background: str = "#000000") -> ColorPalette:
    return ColorPalette(foreground=foreground, background=background, is_high_contrast=True)
