"""
Color difference metrics.

Provides:
    - naive_distance: Euclidean distance in sRGB, scaled to a 0-100 range
    - cie76: Euclidean distance in Lab
    - cie94: CIE 1994 weighted distance (graphic arts constants by default)
    - ciede2000: CIEDE2000 difference, plus a NumPy-broadcasting variant

Every metric accepts Srgb or Lab inputs (naive_distance only Srgb) and
returns a non-negative float. A delta E around 2.3 is the commonly cited
just-noticeable difference.

References:
    Sharma, G., Wu, W., & Dalal, E. N. (2005). "The CIEDE2000 color-difference
    formula: Implementation notes, supplementary test data, and mathematical
    observations." Color Research & Application, 30(1), 21-30.
"""

from __future__ import annotations

import math
from typing import Callable, Dict

import numpy as np

from .color_math import _to_ndarray, to_lab
from .colors import Color, Srgb, UnsupportedColorType

POW25_7 = 25 ** 7  # 6103515625
NAIVE_SCALE = 57.73502691896258  # 100 / sqrt(3)
JND_THRESHOLD = 2.3

CIE94_K1 = 0.045
CIE94_K2 = 0.015
CIEDE2000_SC = 0.045


def naive_distance(color1: Color, color2: Color) -> float:
    """Euclidean sRGB distance; black vs white is 100."""
    for color in (color1, color2):
        if not isinstance(color, Srgb):
            raise UnsupportedColorType(
                f"naive_distance requires Srgb, got {type(color).__name__}"
            )
    delta_r = (color2.r - color1.r) / 255
    delta_g = (color2.g - color1.g) / 255
    delta_b = (color2.b - color1.b) / 255
    delta_e = delta_r * delta_r + delta_g * delta_g + delta_b * delta_b
    return math.sqrt(max(0.0, delta_e)) * NAIVE_SCALE


def cie76(color1: Color, color2: Color) -> float:
    """CIE76 delta E: straight Euclidean distance in Lab."""
    lab1 = to_lab(color1)
    lab2 = to_lab(color2)

    delta_l = lab2.l - lab1.l
    delta_a = lab2.a - lab1.a
    delta_b = lab2.b - lab1.b
    delta_e = delta_l * delta_l + delta_a * delta_a + delta_b * delta_b
    return math.sqrt(max(0.0, delta_e))


def cie94(
    color1: Color,
    color2: Color,
    kl: float = 1.0,
    kc: float = 1.0,
    kh: float = 1.0,
    k1: float = CIE94_K1,
    k2: float = CIE94_K2,
) -> float:
    """
    CIE94 delta E.

    The chroma weighting (Sc, Sh) uses the first color's chroma only, so
    cie94(a, b) and cie94(b, a) generally differ; color1 is the reference.
    Textile applications use kl=2, k1=0.048, k2=0.014.
    """
    lab1 = to_lab(color1)
    lab2 = to_lab(color2)

    delta_l = lab2.l - lab1.l
    delta_a = lab2.a - lab1.a
    delta_b = lab2.b - lab1.b

    c1 = lab1.chroma
    c2 = lab2.chroma
    delta_c = c2 - c1

    delta_h = delta_a * delta_a + delta_b * delta_b - delta_c * delta_c
    delta_h = math.sqrt(max(0.0, delta_h))

    s_l = 1.0
    s_c = 1 + k1 * c1
    s_h = 1 + k2 * c1

    term_l = delta_l / (kl * s_l)
    term_c = delta_c / (kc * s_c)
    term_h = delta_h / (kh * s_h)
    return math.sqrt(max(0.0, term_l * term_l + term_c * term_c + term_h * term_h))


def _hue_angle(b: float, a_prime: float) -> float:
    """Hue in degrees [0, 360); achromatic colors get 0 instead of atan2(0, 0)."""
    if b == 0 and a_prime == 0:
        return 0.0
    h = math.degrees(math.atan2(b, a_prime))
    return h if h >= 0 else h + 360


def _hue_difference(h1: float, h2: float, chroma_product: float) -> float:
    """Signed hue delta h2 - h1 wrapped into [-180, 180]."""
    if chroma_product == 0:
        return 0.0
    diff = h2 - h1
    if abs(diff) <= 180:
        return diff
    if diff > 180:
        return diff - 360
    return diff + 360


def _mean_hue(h1: float, h2: float, chroma_product: float) -> float:
    if chroma_product == 0:
        return h1 + h2
    h_sum = h1 + h2
    if abs(h1 - h2) <= 180:
        return h_sum / 2
    if h_sum < 360:
        return (h_sum + 360) / 2
    return (h_sum - 360) / 2


def ciede2000(
    color1: Color,
    color2: Color,
    kl: float = 1.0,
    kc: float = 1.0,
    kh: float = 1.0,
) -> float:
    """CIEDE2000 color difference between two colors."""
    lab1 = to_lab(color1)
    lab2 = to_lab(color2)
    l1, a1, b1 = lab1.as_tuple()
    l2, a2, b2 = lab2.as_tuple()

    c1 = lab1.chroma
    c2 = lab2.chroma
    c_mean = (c1 + c2) / 2

    # Boost a* at low chroma where it is perceptually compressed
    g = 0.5 * (1 - math.sqrt(c_mean ** 7 / (c_mean ** 7 + POW25_7)))
    a1_prime = (1 + g) * a1
    a2_prime = (1 + g) * a2

    c1_prime = math.sqrt(a1_prime ** 2 + b1 ** 2)
    c2_prime = math.sqrt(a2_prime ** 2 + b2 ** 2)
    chroma_product = c1_prime * c2_prime

    h1_prime = _hue_angle(b1, a1_prime)
    h2_prime = _hue_angle(b2, a2_prime)

    delta_l_prime = l2 - l1
    delta_c_prime = c2_prime - c1_prime
    delta_h = _hue_difference(h1_prime, h2_prime, chroma_product)
    delta_h_prime = 2 * math.sqrt(chroma_product) * math.sin(math.radians(delta_h / 2))

    l_mean_prime = (l1 + l2) / 2
    c_mean_prime = (c1_prime + c2_prime) / 2
    h_mean_prime = _mean_hue(h1_prime, h2_prime, chroma_product)

    t = (
        1
        - 0.17 * math.cos(math.radians(h_mean_prime - 30))
        + 0.24 * math.cos(math.radians(2 * h_mean_prime))
        + 0.32 * math.cos(math.radians(3 * h_mean_prime + 6))
        - 0.20 * math.cos(math.radians(4 * h_mean_prime - 63))
    )

    delta_theta = 30 * math.exp(-(((h_mean_prime - 275) / 25) ** 2))
    r_c = 2 * math.sqrt(c_mean_prime ** 7 / (c_mean_prime ** 7 + POW25_7))

    l_offset = (l_mean_prime - 50) ** 2
    s_l = 1 + (0.015 * l_offset) / math.sqrt(20 + l_offset)
    s_c = 1 + CIEDE2000_SC * c_mean_prime
    s_h = 1 + 0.015 * c_mean_prime * t
    r_t = -math.sin(math.radians(2 * delta_theta)) * r_c

    term_l = delta_l_prime / (kl * s_l)
    term_c = delta_c_prime / (kc * s_c)
    term_h = delta_h_prime / (kh * s_h)
    delta_e = term_l ** 2 + term_c ** 2 + term_h ** 2 + r_t * term_c * term_h

    # Non-negative for real input; clamp rounding noise near zero
    return math.sqrt(max(0.0, delta_e))


def delta_e2000(lab1, lab2, kl: float = 1.0, kc: float = 1.0, kh: float = 1.0) -> np.ndarray:
    """
    CIEDE2000 color difference with numpy broadcasting.

    lab1 and lab2 may be:
        - matching shapes (...,3)
        - lab1 shape (...,3) and lab2 shape (3,) (broadcast)
    Returns an array with the broadcasted leading dimensions.
    """

    lab1 = _to_ndarray(lab1)
    lab2 = _to_ndarray(lab2)

    L1, a1, b1 = lab1[..., 0], lab1[..., 1], lab1[..., 2]
    L2, a2, b2 = lab2[..., 0], lab2[..., 1], lab2[..., 2]

    C1 = np.sqrt(a1**2 + b1**2)
    C2 = np.sqrt(a2**2 + b2**2)
    C_mean = (C1 + C2) / 2

    G = 0.5 * (1 - np.sqrt((C_mean**7) / (C_mean**7 + POW25_7)))
    a1_prime = (1 + G) * a1
    a2_prime = (1 + G) * a2
    C1_prime = np.sqrt(a1_prime**2 + b1**2)
    C2_prime = np.sqrt(a2_prime**2 + b2**2)
    C_mean_prime = (C1_prime + C2_prime) / 2
    chroma_product = C1_prime * C2_prime
    achromatic = chroma_product == 0

    def h_func(a_component, b_component):
        angle = np.degrees(np.arctan2(b_component, a_component))
        angle = np.where(angle < 0, angle + 360, angle)
        # signed zeros would give 180 here
        return np.where((a_component == 0) & (b_component == 0), 0.0, angle)

    h1_prime = h_func(a1_prime, b1)
    h2_prime = h_func(a2_prime, b2)

    delta_h_prime = h2_prime - h1_prime
    delta_h_prime = np.where(
        delta_h_prime > 180,
        delta_h_prime - 360,
        np.where(delta_h_prime < -180, delta_h_prime + 360, delta_h_prime),
    )
    delta_h_prime = np.where(achromatic, 0.0, delta_h_prime)

    delta_L_prime = L2 - L1
    delta_C_prime = C2_prime - C1_prime
    delta_H_prime = 2 * np.sqrt(chroma_product) * np.sin(
        np.radians(delta_h_prime / 2)
    )

    L_mean = (L1 + L2) / 2
    H_sum = h1_prime + h2_prime
    H_mean_prime = np.where(
        np.abs(h1_prime - h2_prime) <= 180,
        H_sum / 2,
        np.where(H_sum < 360, (H_sum + 360) / 2, (H_sum - 360) / 2),
    )
    H_mean_prime = np.where(achromatic, H_sum, H_mean_prime)

    T = (
        1
        - 0.17 * np.cos(np.radians(H_mean_prime - 30))
        + 0.24 * np.cos(np.radians(2 * H_mean_prime))
        + 0.32 * np.cos(np.radians(3 * H_mean_prime + 6))
        - 0.20 * np.cos(np.radians(4 * H_mean_prime - 63))
    )

    delta_theta = 30 * np.exp(-(((H_mean_prime - 275) / 25) ** 2))
    R_C = 2 * np.sqrt((C_mean_prime**7) / (C_mean_prime**7 + POW25_7))
    R_T = -np.sin(np.radians(2 * delta_theta)) * R_C

    S_L = 1 + ((0.015 * (L_mean - 50) ** 2) / np.sqrt(20 + (L_mean - 50) ** 2))
    S_C = 1 + CIEDE2000_SC * C_mean_prime
    S_H = 1 + 0.015 * C_mean_prime * T

    term_L = delta_L_prime / (kl * S_L)
    term_C = delta_C_prime / (kc * S_C)
    term_H = delta_H_prime / (kh * S_H)
    delta_E = np.sqrt(
        np.maximum(0.0, term_L**2 + term_C**2 + term_H**2 + R_T * term_C * term_H)
    )

    return delta_E


METRICS: Dict[str, Callable[..., float]] = {
    "naive": naive_distance,
    "cie76": cie76,
    "cie94": cie94,
    "ciede2000": ciede2000,
}


def delta_e(color1: Color, color2: Color, metric: str = "ciede2000", **weights) -> float:
    """Compute the difference between two colors with a metric chosen by name."""
    try:
        func = METRICS[metric]
    except KeyError:
        raise ValueError(
            f"Unknown metric '{metric}'. Available: {list(METRICS.keys())}"
        ) from None
    return func(color1, color2, **weights)


def is_noticeable(
    color1: Color,
    color2: Color,
    metric: str = "ciede2000",
    threshold: float = JND_THRESHOLD,
) -> bool:
    """True when the two colors differ by at least the just-noticeable threshold."""
    return delta_e(color1, color2, metric) >= threshold
