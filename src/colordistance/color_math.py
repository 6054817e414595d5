"""
Color space conversion: sRGB -> linear RGB -> XYZ -> Lab.

Provides:
    - Scalar conversions on the value types (to_xyz, xyz_to_lab, srgb_to_lab)
    - The to_lab dispatcher used by every distance metric
    - Vectorised NumPy equivalents for (..., 3) arrays

All conversions use illuminant D65 and the 2 degree observer. XYZ is kept on
the 0-1 scale.
"""

from __future__ import annotations

import numpy as np

from .colors import InvalidInput, Lab, Srgb, UnsupportedColorType, Xyz

SRGB_TO_XYZ = np.array(
    [
        [0.412453, 0.357580, 0.180423],
        [0.212671, 0.715160, 0.072169],
        [0.019334, 0.119193, 0.950227],
    ],
    dtype=np.float64,
)

D65_WHITE = np.array([0.95047, 1.0, 1.08883], dtype=np.float64)

# CIE Lab pivot: cube root above EPSILON, linear segment below
EPSILON = 0.008856
LINEAR_SLOPE = 7.787
OFFSET = 16 / 116

_MATRIX = SRGB_TO_XYZ.tolist()
_WHITE = D65_WHITE.tolist()


def _pivot_srgb(n: float) -> float:
    return ((n + 0.055) / 1.055) ** 2.4 if n > 0.04045 else n / 12.92


def _pivot_xyz(t: float) -> float:
    return t ** (1 / 3) if t > EPSILON else LINEAR_SLOPE * t + OFFSET


def to_xyz(color: Srgb) -> Xyz:
    """Convert an sRGB color to CIE XYZ (D65)."""
    if not isinstance(color, Srgb):
        raise UnsupportedColorType(f"expected Srgb, got {type(color).__name__}")
    rgb = [_pivot_srgb(channel / 255) for channel in color.as_tuple()]
    x, y, z = (sum(m * c for m, c in zip(row, rgb)) for row in _MATRIX)
    return Xyz(x, y, z)


def xyz_to_lab(xyz: Xyz) -> Lab:
    """Convert XYZ to Lab (D65)."""
    if not isinstance(xyz, Xyz):
        raise UnsupportedColorType(f"expected Xyz, got {type(xyz).__name__}")
    fx, fy, fz = (
        _pivot_xyz(value / white) for value, white in zip(xyz.as_tuple(), _WHITE)
    )
    return Lab(116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz))


def srgb_to_lab(color: Srgb) -> Lab:
    """Convenience helper for sRGB -> Lab."""
    return xyz_to_lab(to_xyz(color))


def to_lab(color) -> Lab:
    """
    Coerce a color to Lab.

    Lab values pass through unchanged, Srgb values go through the full
    pipeline. Anything else (including Xyz) raises UnsupportedColorType.
    """
    if isinstance(color, Lab):
        return color
    if isinstance(color, Srgb):
        return srgb_to_lab(color)
    raise UnsupportedColorType(
        f"cannot convert {type(color).__name__} to Lab; expected Srgb or Lab"
    )


def _to_ndarray(color) -> np.ndarray:
    arr = np.asarray(color, dtype=np.float64)
    if arr.ndim == 0 or arr.shape[-1] != 3:
        raise InvalidInput("Input color must have three channels")
    return arr


def srgb_to_linear(rgb) -> np.ndarray:
    """Convert sRGB in the 0-255 range to linear RGB (0-1)."""
    rgb = _to_ndarray(rgb)
    if not np.all(np.isfinite(rgb)) or np.any((rgb < 0) | (rgb > 255)):
        raise InvalidInput("sRGB channel values must lie in 0-255")
    rgb = rgb / 255.0
    mask = rgb > 0.04045
    return np.where(mask, ((rgb + 0.055) / 1.055) ** 2.4, rgb / 12.92)


def rgb_to_xyz(rgb) -> np.ndarray:
    """Convert sRGB arrays to CIE XYZ (D65)."""
    linear = srgb_to_linear(rgb)
    flat = linear.reshape(-1, 3)
    xyz = flat @ SRGB_TO_XYZ.T
    return xyz.reshape(linear.shape)


def xyz_array_to_lab(xyz) -> np.ndarray:
    """Convert XYZ arrays to Lab (D65)."""
    xyz = _to_ndarray(xyz) / D65_WHITE

    def f(t):
        return np.where(t > EPSILON, np.cbrt(t), LINEAR_SLOPE * t + OFFSET)

    fx = f(xyz[..., 0])
    fy = f(xyz[..., 1])
    fz = f(xyz[..., 2])

    L = (116 * fy) - 16
    a = 500 * (fx - fy)
    b = 200 * (fy - fz)
    return np.stack([L, a, b], axis=-1)


def rgb_to_lab(rgb) -> np.ndarray:
    """sRGB -> Lab for arrays of shape (..., 3)."""
    return xyz_array_to_lab(rgb_to_xyz(rgb))
