"""
Configuration management for the city road-network engine.
"""

import json
from dataclasses import dataclass, asdict


@dataclass
class GeneratorConfig:
    """Configuration for city generation, export and viewing."""

    # Reproducibility
    seed: int = 42

    # Grid geometry
    block_size_m: float = 100.0
    spur_step_fraction: float = 0.5

    # Debug window
    window_width_px: int = 1200
    window_height_px: int = 800

    # Camera
    camera_padding: float = 1.10
    min_zoom: float = 1e-4
    max_zoom: float = 1e6
    zoom_step: float = 1.15

    # Map file output
    coordinate_precision: int = 6

    # Road graph
    endpoint_epsilon_m: float = 1.0

    def __post_init__(self):
        if self.block_size_m <= 0:
            raise ValueError(f"block_size_m must be positive, got {self.block_size_m}")
        if self.window_width_px <= 0 or self.window_height_px <= 0:
            raise ValueError("window dimensions must be positive")
        if self.camera_padding <= 0:
            raise ValueError(f"camera_padding must be positive, got {self.camera_padding}")
        if not 0 < self.min_zoom <= self.max_zoom:
            raise ValueError(
                f"invalid zoom range [{self.min_zoom}, {self.max_zoom}]"
            )

    @classmethod
    def from_json(cls, filepath: str) -> "GeneratorConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls(**data)

    def to_json(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(asdict(self), f, indent=2)
