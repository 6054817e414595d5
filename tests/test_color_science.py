import numpy as np
import pytest
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from colordistance.color_math import rgb_to_lab, srgb_to_lab, to_lab, to_xyz, xyz_to_lab
from colordistance.colors import InvalidInput, Lab, Srgb, UnsupportedColorType, Xyz
from colordistance.distance import ciede2000, delta_e2000

# Sharma, Wu & Dalal 2005, Table 1
SHARMA_PAIRS = [
    ((50.0, 2.6772, -79.7751), (50.0, 0.0, -82.7485), 2.0425),
    ((50.0, 3.1571, -77.2803), (50.0, 0.0, -82.7485), 2.8615),
    ((50.0, 2.8361, -74.0200), (50.0, 0.0, -82.7485), 3.4412),
    ((50.0, -1.3802, -84.2814), (50.0, 0.0, -82.7485), 1.0000),
    ((50.0, -1.1848, -84.8006), (50.0, 0.0, -82.7485), 1.0000),
    ((50.0, -0.9009, -85.5211), (50.0, 0.0, -82.7485), 1.0000),
    ((50.0, 0.0, 0.0), (50.0, -1.0, 2.0), 2.3669),
    ((50.0, -1.0, 2.0), (50.0, 0.0, 0.0), 2.3669),
    ((50.0, 2.4900, -0.0010), (50.0, -2.4900, 0.0009), 7.1792),
    ((50.0, 2.4900, -0.0010), (50.0, -2.4900, 0.0010), 7.1792),
    ((50.0, 2.4900, -0.0010), (50.0, -2.4900, 0.0011), 7.2195),
    ((50.0, 2.4900, -0.0010), (50.0, -2.4900, 0.0012), 7.2195),
    ((50.0, -0.0010, 2.4900), (50.0, 0.0009, -2.4900), 4.8045),
    ((50.0, -0.0010, 2.4900), (50.0, 0.0010, -2.4900), 4.8045),
    ((50.0, -0.0010, 2.4900), (50.0, 0.0011, -2.4900), 4.7461),
    ((50.0, 2.5, 0.0), (50.0, 0.0, -2.5), 4.3065),
    ((50.0, 2.5, 0.0), (73.0, 25.0, -18.0), 27.1492),
    ((50.0, 2.5, 0.0), (61.0, -5.0, 29.0), 22.8977),
    ((50.0, 2.5, 0.0), (56.0, -27.0, -3.0), 31.9030),
    ((50.0, 2.5, 0.0), (58.0, 24.0, 15.0), 19.4535),
    ((50.0, 2.5, 0.0), (50.0, 3.1736, 0.5854), 1.0000),
    ((50.0, 2.5, 0.0), (50.0, 3.2972, 0.0), 1.0000),
    ((50.0, 2.5, 0.0), (50.0, 1.8634, 0.5757), 1.0000),
    ((50.0, 2.5, 0.0), (50.0, 3.2592, 0.3350), 1.0000),
    ((60.2574, -34.0099, 36.2677), (60.4626, -34.1751, 39.4387), 1.2644),
    ((63.0109, -31.0961, -5.8663), (62.8187, -29.7946, -4.0864), 1.2630),
    ((61.2901, 3.7196, -5.3901), (61.4292, 2.2480, -4.9620), 1.8731),
    ((35.0831, -44.1164, 3.7933), (35.0232, -40.0716, 1.5901), 1.8645),
    ((22.7233, 20.0904, -46.6940), (23.0331, 14.9730, -42.5619), 2.0373),
    ((36.4612, 47.8580, 18.3852), (36.2715, 50.5065, 21.2231), 1.4146),
    ((90.8027, -2.0831, 1.4410), (91.1528, -1.6435, 0.0447), 1.4441),
    ((90.9257, -0.5406, -0.9208), (88.6381, -0.8985, -0.7239), 1.5381),
    ((6.7747, -0.2908, -2.4247), (5.8714, -0.0985, -2.2286), 0.6377),
    ((2.0776, 0.0795, -1.1350), (0.9033, -0.0636, -0.5514), 0.9082),
]


@pytest.mark.parametrize("lab1, lab2, expected", SHARMA_PAIRS)
def test_ciede2000_reference_pairs(lab1, lab2, expected):
    assert ciede2000(Lab(*lab1), Lab(*lab2)) == pytest.approx(expected, abs=1e-4)
    # the table is symmetric
    assert ciede2000(Lab(*lab2), Lab(*lab1)) == pytest.approx(expected, abs=1e-4)


def test_delta_e2000_vectorised_matches_scalar():
    lab1 = np.array([pair[0] for pair in SHARMA_PAIRS])
    lab2 = np.array([pair[1] for pair in SHARMA_PAIRS])
    expected = np.array([pair[2] for pair in SHARMA_PAIRS])

    result = delta_e2000(lab1, lab2)
    scalar = [ciede2000(Lab(*a), Lab(*b)) for a, b in zip(lab1, lab2)]

    assert result.shape == (len(SHARMA_PAIRS),)
    np.testing.assert_allclose(result, scalar, atol=1e-10)
    np.testing.assert_allclose(result, expected, atol=1e-4)


def test_delta_e2000_broadcasts_single_reference():
    grid = np.array([[50.0, 0.0, 0.0], [50.0, -1.0, 2.0], [60.0, 10.0, 10.0]])
    distances = delta_e2000(grid, np.array([50.0, 0.0, 0.0]))
    assert distances[0] == 0.0
    assert distances[1] == pytest.approx(2.3669, abs=1e-4)
    assert np.all(distances >= 0)


def test_srgb_red_reference_vector():
    lab = srgb_to_lab(Srgb(255, 0, 0))
    assert lab.l == pytest.approx(53.24, abs=0.1)
    assert lab.a == pytest.approx(80.09, abs=0.1)
    assert lab.b == pytest.approx(67.20, abs=0.1)


def test_white_and_black_hit_lightness_extremes():
    white = srgb_to_lab(Srgb(255, 255, 255))
    black = srgb_to_lab(Srgb(0, 0, 0))
    assert white.l == pytest.approx(100.0, abs=0.01)
    assert abs(white.a) < 0.01 and abs(white.b) < 0.01
    assert black.as_tuple() == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)


def test_to_xyz_applies_d65_matrix():
    xyz = to_xyz(Srgb(255, 0, 0))
    assert xyz.as_tuple() == pytest.approx((0.412453, 0.212671, 0.019334))

    # below the 0.04045 knee the pivot is linear
    dark = to_xyz(Srgb(10, 10, 10))
    assert dark.y == pytest.approx((10 / 255) / 12.92, rel=1e-4)


def test_xyz_to_lab_uses_linear_segment_for_dark_values():
    lab = xyz_to_lab(Xyz(0.0, 0.001, 0.0))
    expected_fy = 7.787 * 0.001 + 16 / 116
    assert lab.l == pytest.approx(116 * expected_fy - 16)


def test_to_lab_dispatch():
    lab = Lab(50.0, 10.0, -10.0)
    assert to_lab(lab) is lab
    assert to_lab(Srgb(255, 0, 0)) == srgb_to_lab(Srgb(255, 0, 0))

    with pytest.raises(UnsupportedColorType):
        to_lab(Xyz(0.2, 0.3, 0.4))
    with pytest.raises(UnsupportedColorType):
        to_lab((255, 0, 0))


def test_conversion_is_deterministic():
    color = Srgb(12, 200, 77)
    assert srgb_to_lab(color) == srgb_to_lab(Srgb(12, 200, 77))


def test_array_pipeline_matches_scalar():
    samples = [(0, 0, 0), (255, 255, 255), (255, 0, 0), (12, 200, 77), (3, 9, 250), (128, 128, 128)]
    lab_array = rgb_to_lab(np.array(samples, dtype=np.uint8))
    for row, rgb in zip(lab_array, samples):
        assert tuple(row) == pytest.approx(srgb_to_lab(Srgb(*rgb)).as_tuple(), abs=1e-9)


@pytest.mark.parametrize(
    "rgb",
    [
        [300.0, -20.0, 0.0],
        [[0, 0, 0], [0, 256, 0]],
        [np.nan, 0.0, 0.0],
        [np.inf, 0.0, 0.0],
    ],
)
def test_array_pipeline_rejects_out_of_range_channels(rgb):
    with pytest.raises(InvalidInput):
        rgb_to_lab(np.array(rgb, dtype=np.float64))


def test_array_pipeline_rejects_wrong_channel_count():
    with pytest.raises(InvalidInput):
        rgb_to_lab(np.zeros((4, 2)))
