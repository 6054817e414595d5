"""
Configuration management for color difference calculations.
"""

import logging
import os
import yaml
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

from .colors import Color
from .distance import CIE94_K1, CIE94_K2, JND_THRESHOLD, METRICS, delta_e

logger = logging.getLogger(__name__)


@dataclass
class Cie94Weights:
    """CIE94 parametric factors (graphic arts defaults)."""
    kl: float = 1.0
    kc: float = 1.0
    kh: float = 1.0
    k1: float = CIE94_K1
    k2: float = CIE94_K2

    @classmethod
    def textiles(cls) -> "Cie94Weights":
        return cls(kl=2.0, k1=0.048, k2=0.014)


@dataclass
class Ciede2000Weights:
    """CIEDE2000 parametric factors."""
    kl: float = 1.0
    kc: float = 1.0
    kh: float = 1.0


def _load_weights(weights_cls, section: str, data: Dict[str, Any]):
    """Build a weights dataclass from a YAML section; an empty section means defaults."""
    values = data.get(section) or {}
    if not isinstance(values, dict):
        raise ValueError(f"{section} must be a mapping, got {values!r}")
    allowed = {f.name for f in fields(weights_cls)}
    unknown = sorted(set(values) - allowed)
    if unknown:
        raise ValueError(f"Unknown {section} keys: {unknown}. Allowed: {sorted(allowed)}")
    return weights_cls(**values)


@dataclass
class DistanceConfig:
    """Main configuration class."""
    metric: str = "ciede2000"
    jnd_threshold: float = JND_THRESHOLD
    config_file: Optional[str] = None

    cie94: Cie94Weights = field(default_factory=Cie94Weights)
    ciede2000: Ciede2000Weights = field(default_factory=Ciede2000Weights)

    @classmethod
    def from_yaml(cls, config_path: str, **overrides) -> "DistanceConfig":
        """Load configuration from YAML file with optional overrides."""
        if not os.path.exists(config_path):
            logger.debug("Config file %s not found, using defaults", config_path)
            data = {}
        else:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

        config = cls(
            metric=data.get('metric', 'ciede2000'),
            jnd_threshold=data.get('jnd_threshold', JND_THRESHOLD),
            config_file=config_path,
            cie94=_load_weights(Cie94Weights, 'cie94', data),
            ciede2000=_load_weights(Ciede2000Weights, 'ciede2000', data),
        )

        # Apply overrides, top level first
        for key, value in overrides.items():
            if key != 'config_file' and hasattr(config, key) and not isinstance(
                getattr(config, key), (Cie94Weights, Ciede2000Weights)
            ):
                setattr(config, key, value)
            elif key.startswith('cie94_') and hasattr(config.cie94, key[6:]):
                setattr(config.cie94, key[6:], value)
            elif key.startswith('ciede2000_') and hasattr(config.ciede2000, key[10:]):
                setattr(config.ciede2000, key[10:], value)
            else:
                raise ValueError(f"Unknown config override: {key}")

        config.validate()
        return config

    def validate(self):
        """Validate configuration parameters."""
        if self.metric not in METRICS:
            raise ValueError(
                f"Unknown metric '{self.metric}'. Available: {list(METRICS.keys())}"
            )

        if self.jnd_threshold < 0:
            raise ValueError("JND threshold must be non-negative")

        for name, weights in (("cie94", self.cie94), ("ciede2000", self.ciede2000)):
            for key, value in asdict(weights).items():
                if value <= 0:
                    raise ValueError(f"{name}.{key} must be positive")

    def weights_for(self, metric: Optional[str] = None) -> Dict[str, float]:
        """Keyword weights to pass to the given metric function."""
        metric = metric or self.metric
        if metric == "cie94":
            return asdict(self.cie94)
        if metric == "ciede2000":
            return asdict(self.ciede2000)
        return {}

    def distance(self, color1: Color, color2: Color) -> float:
        """Difference between two colors using the configured metric and weights."""
        return delta_e(color1, color2, self.metric, **self.weights_for())

    def is_noticeable(self, color1: Color, color2: Color) -> bool:
        return self.distance(color1, color2) >= self.jnd_threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'metric': self.metric,
            'jnd_threshold': self.jnd_threshold,
            'cie94': asdict(self.cie94),
            'ciede2000': asdict(self.ciede2000),
        }

    def save_yaml(self, path: Optional[str] = None):
        """Save configuration to YAML file."""
        if path is None:
            path = self.config_file or "colordistance.yaml"

        dir_path = os.path.dirname(path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2)
