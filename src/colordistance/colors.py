"""
Immutable color value types shared across the distance pipeline.

Provides:
    - Srgb: 8-bit device RGB, channels validated to [0, 255]
    - Xyz: CIE 1931 tristimulus values (0-1 scale, D65)
    - Lab: CIE L*a*b* coordinates, unconstrained
    - Color: the union every distance function accepts
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Tuple, Union


class ColorDistanceError(Exception):
    """Base class for errors raised by this package."""


class InvalidInput(ColorDistanceError, ValueError):
    """A color value could not be built from the given components."""


class UnsupportedColorType(ColorDistanceError, TypeError):
    """A function received a color representation it does not accept."""


@dataclass(frozen=True)
class Srgb:
    """Device sRGB color with channels in 0-255."""
    r: float
    g: float
    b: float

    def __post_init__(self):
        for channel in ("r", "g", "b"):
            value = getattr(self, channel)
            # bool is a Real subclass but never a channel value
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidInput(f"{channel} must be a number, got {value!r}")
            if not 0 <= value <= 255:
                raise InvalidInput(f"{channel} out of range 0-255: {value}")

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class Xyz:
    """CIE XYZ tristimulus values, Y of the reference white is 1.0."""
    x: float
    y: float
    z: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Lab:
    """CIE L*a*b* color. Any real triple is accepted."""
    l: float
    a: float
    b: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.l, self.a, self.b)

    @property
    def chroma(self) -> float:
        return math.sqrt(self.a * self.a + self.b * self.b)


Color = Union[Srgb, Lab]
