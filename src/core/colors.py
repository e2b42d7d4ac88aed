"""
Color parsing and WCAG contrast helpers.

Colors are accepted as hex ("#1677ff", "1677ff", "#fff") or CSS rgb()/rgba()
strings ("rgb(28, 28, 29)").
"""

import re

from core.config import CONTRAST_THRESHOLD

BLACK = "#000000"
WHITE = "#ffffff"

_RGB_PATTERN = re.compile(r"rgba?\((\d+),\s*(\d+),\s*(\d+)(?:,\s*[\d.]+)?\)")
_HEX_PATTERN = re.compile(r"^[0-9A-Fa-f]{3,6}$")

RGB = tuple[int, int, int]


def hex_to_rgb(value: str) -> RGB | None:
    """Convert a 3- or 6-digit hex color to (r, g, b), or None if malformed."""
    clean = value.replace("#", "")
    if not re.fullmatch(r"[0-9A-Fa-f]*", clean):
        return None

    if len(clean) == 3:
        return tuple(int(ch * 2, 16) for ch in clean)
    if len(clean) == 6:
        return tuple(int(clean[i : i + 2], 16) for i in (0, 2, 4))
    return None


def parse_rgb_string(value: str) -> RGB | None:
    """Parse 'rgb(r, g, b)' or 'rgba(r, g, b, a)'."""
    match = _RGB_PATTERN.search(value)
    if not match:
        return None
    r, g, b = (int(group) for group in match.groups())
    if max(r, g, b) > 255:
        return None
    return r, g, b


def parse_color(value: str) -> RGB | None:
    """Parse a hex or rgb() color string. Returns None when unrecognised."""
    value = value.strip()
    if value.startswith("rgb"):
        return parse_rgb_string(value)
    if value.startswith("#") or _HEX_PATTERN.match(value):
        return hex_to_rgb(value)
    return None


def relative_luminance(r: int, g: int, b: int) -> float:
    """WCAG relative luminance in [0, 1]."""

    def channel(val: int) -> float:
        normalized = val / 255
        if normalized <= 0.03928:
            return normalized / 12.92
        return ((normalized + 0.055) / 1.055) ** 2.4

    return 0.2126 * channel(r) + 0.7152 * channel(g) + 0.0722 * channel(b)


def contrast_text_color(background: str | None, threshold: float = CONTRAST_THRESHOLD) -> str:
    """
    Pick black or white text for a background color.

    Unparseable (or missing) colors get white text.
    """
    rgb = parse_color(background) if background else None
    if rgb is None:
        return WHITE
    return BLACK if relative_luminance(*rgb) > threshold else WHITE


def contrast_ratio(color1: str, color2: str) -> float:
    """WCAG contrast ratio between two colors (1-21). Invalid input gives 1."""
    rgb1 = parse_color(color1)
    rgb2 = parse_color(color2)
    if rgb1 is None or rgb2 is None:
        return 1.0

    lum1 = relative_luminance(*rgb1)
    lum2 = relative_luminance(*rgb2)
    lighter, darker = max(lum1, lum2), min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def meets_wcag_aa(foreground: str, background: str, large_text: bool = False) -> bool:
    """Check WCAG AA: 4.5:1 for body text, 3:1 for large text."""
    required = 3.0 if large_text else 4.5
    return contrast_ratio(foreground, background) >= required
