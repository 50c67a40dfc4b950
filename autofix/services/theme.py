"""
Theme Service

Derives the dashboard's primary color ramp from one base hex color.
Light shades mix the base with white, dark shades mix it with black.
"""

import re
from typing import Dict, Tuple

RGB = Tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)

DEFAULT_PRIMARY_COLOR = "#3b82f6"

# shade -> (mix color, weight of the mix color)
SHADE_MIX = {
    "50": (WHITE, 0.9),
    "100": (WHITE, 0.8),
    "500": (WHITE, 0.0),
    "600": (BLACK, 0.1),
    "700": (BLACK, 0.2),
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_hex_color(value: str) -> RGB:
    """
    Parse '#rrggbb', 'rrggbb', '#rgb' or 'rgb'

    Raises:
        ValueError on anything else
    """
    match = _HEX_RE.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid hex color: {value!r}")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def mix(base: RGB, other: RGB, weight: float) -> RGB:
    """Per-channel blend; weight is the share of `other`"""
    return tuple(
        int(round(b * (1 - weight) + o * weight))
        for b, o in zip(base, other)
    )


def generate_color_ramp(base_hex: str) -> Dict[str, str]:
    """
    Five-shade ramp (50, 100, 500, 600, 700) as hex strings.
    Shade 500 is the normalized base color.
    """
    base = parse_hex_color(base_hex)
    return {
        shade: to_hex(mix(base, other, weight))
        for shade, (other, weight) in SHADE_MIX.items()
    }


def theme_css_variables(base_hex: str) -> str:
    """
    CSS custom properties for the document root, channels space-separated
    so they work with `rgb(var(--color-primary-500) / <alpha>)`.
    """
    lines = []
    for shade, hex_value in generate_color_ramp(base_hex).items():
        r, g, b = parse_hex_color(hex_value)
        lines.append(f"--color-primary-{shade}: {r} {g} {b};")
    return ":root {\n  " + "\n  ".join(lines) + "\n}"
