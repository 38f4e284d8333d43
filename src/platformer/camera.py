# src/platformer/camera.py
from __future__ import annotations
from dataclasses import dataclass

from .config import WIDTH, CAMERA_LEAD


@dataclass
class Camera:
    """One-dimensional horizontal follower. x never decreases."""
    x: float = 0.0
    viewport_width: float = WIDTH

    def follow(self, player_x: float) -> float:
        target = max(0.0, player_x - self.viewport_width * CAMERA_LEAD)
        self.x = max(self.x, target)
        return self.x

    def reset(self):
        self.x = 0.0

    def to_screen(self, world_x: float) -> float:
        return world_x - self.x
