"""
Named color palettes with nearest-color search.
"""

import csv
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .color_math import srgb_to_lab, to_lab
from .colors import Color, InvalidInput, Lab, Srgb
from .distance import delta_e, delta_e2000

logger = logging.getLogger(__name__)


@dataclass
class PaletteColor:
    """A single palette entry with its precomputed Lab coordinates."""
    code: str
    name: str
    rgb: Srgb
    lab: Optional[Lab] = None
    hex: str = ""

    def __post_init__(self):
        """Calculate hex string and Lab coordinates."""
        r, g, b = (int(round(c)) for c in self.rgb.as_tuple())
        self.hex = f"#{r:02x}{g:02x}{b:02x}"
        if self.lab is None:
            self.lab = srgb_to_lab(self.rgb)


class Palette:
    """Ordered collection of palette colors with CIEDE2000 matching."""

    def __init__(self, colors: Iterable[PaletteColor] = ()):
        self.colors: List[PaletteColor] = list(colors)
        self.lookup: Dict[str, PaletteColor] = {c.code: c for c in self.colors}
        self.lab_array: Optional[np.ndarray] = None
        self._compute_lab_array()

    @classmethod
    def from_csv(cls, csv_path: str) -> "Palette":
        """Load a palette from a CSV file with columns code,name,r,g,b."""
        if not os.path.exists(csv_path):
            raise FileNotFoundError(f"Palette file not found: {csv_path}")

        colors = []
        with open(csv_path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if not row or not row.get('code'):
                    continue
                try:
                    rgb = Srgb(int(row['r']), int(row['g']), int(row['b']))
                except (InvalidInput, TypeError, ValueError, KeyError) as e:
                    logger.warning("Skipping invalid palette entry %s: %s", row, e)
                    continue
                name = (row.get('name') or '').strip()
                colors.append(PaletteColor(row['code'].strip(), name, rgb))

        logger.info("Loaded %d palette colors from %s", len(colors), csv_path)
        return cls(colors)

    def _compute_lab_array(self):
        """Pre-compute Lab coordinates for vectorised searching."""
        if self.colors:
            self.lab_array = np.array([c.lab.as_tuple() for c in self.colors])
        else:
            self.lab_array = None

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[PaletteColor]:
        return iter(self.colors)

    def get(self, code: str) -> Optional[PaletteColor]:
        """Get a palette color by code."""
        return self.lookup.get(code)

    def distances(self, color: Color, metric: str = "ciede2000") -> List[Tuple[PaletteColor, float]]:
        """Distance from color to every entry, closest first."""
        if metric == "naive":
            pairs = [(entry, delta_e(entry.rgb, color, metric)) for entry in self.colors]
        else:
            target = to_lab(color)
            pairs = [(entry, delta_e(entry.lab, target, metric)) for entry in self.colors]
        # sorted() is stable, so ties keep palette order
        return sorted(pairs, key=lambda pair: pair[1])

    def nearest(self, color: Color, metric: str = "ciede2000") -> PaletteColor:
        """Find the palette color closest to color under the given metric."""
        if not self.colors:
            raise ValueError("Palette is empty")
        return self.distances(color, metric)[0][0]

    def nearest_fast(self, color: Color) -> PaletteColor:
        """Nearest color by CIEDE2000 using the precomputed Lab array."""
        if self.lab_array is None:
            raise ValueError("Palette is empty")
        target = np.array(to_lab(color).as_tuple())
        distances = delta_e2000(self.lab_array, target)
        return self.colors[int(np.argmin(distances))]
