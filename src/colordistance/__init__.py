"""
Color Distance

Perceptual color difference between sRGB and CIE L*a*b* colors: conversion
through CIE XYZ (D65, 2 degree observer) and the naive RGB, CIE76, CIE94 and
CIEDE2000 metrics.
"""

__version__ = "1.0.0"

from .colors import (
    Color,
    ColorDistanceError,
    InvalidInput,
    Lab,
    Srgb,
    UnsupportedColorType,
    Xyz,
)
from .color_math import rgb_to_lab, srgb_to_lab, to_lab, to_xyz, xyz_to_lab
from .distance import (
    JND_THRESHOLD,
    METRICS,
    cie76,
    cie94,
    ciede2000,
    delta_e,
    delta_e2000,
    is_noticeable,
    naive_distance,
)
from .palette import Palette, PaletteColor
from .config import DistanceConfig

__all__ = [
    "Color",
    "ColorDistanceError",
    "InvalidInput",
    "Lab",
    "Srgb",
    "UnsupportedColorType",
    "Xyz",
    "rgb_to_lab",
    "srgb_to_lab",
    "to_lab",
    "to_xyz",
    "xyz_to_lab",
    "JND_THRESHOLD",
    "METRICS",
    "cie76",
    "cie94",
    "ciede2000",
    "delta_e",
    "delta_e2000",
    "is_noticeable",
    "naive_distance",
    "Palette",
    "PaletteColor",
    "DistanceConfig",
]
