# src/env/observations.py
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import numpy as np

from src.platformer.config import (
    WIDTH, HEIGHT, MOVE_SPEED, SPEED_BOOST_MULTIPLIER, BOUNCE_STRENGTH,
    COMBO_MAX_MULTIPLIER,
)

# Probe offsets ahead of the player's right edge (world units)
PROBE_OFFSETS: Tuple[int, int, int] = (60, 160, 260)
OBS_SIZE = 7 + len(PROBE_OFFSETS) + 2

VX_MAX = MOVE_SPEED * SPEED_BOOST_MULTIPLIER
VY_MAX = abs(BOUNCE_STRENGTH) * 2


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def _surface_at_x(platforms: Sequence, x: float) -> Optional[float]:
    """Top y of the highest platform covering x, None if there is none."""
    best: Optional[float] = None
    for plat in platforms:
        if plat.x <= x < plat.x + plat.width:
            if best is None or plat.y < best:
                best = plat.y
    return best


def _nearest_food_ahead(world) -> Tuple[float, float]:
    p = world.player
    best = None
    for food in world.level.foods:
        dx = food.x - p.x
        if dx >= -p.width and (best is None or dx < best[0]):
            best = (dx, food.y - p.y)
    if best is None:
        return 1.0, 0.0
    return _clamp(best[0] / WIDTH, -1.0, 1.0), _clamp(best[1] / HEIGHT, -1.0, 1.0)


def build_observation(world, probe_offsets: Tuple[int, ...] = PROBE_OFFSETS) -> np.ndarray:
    """
    Fixed (12,) float32 vector:
      [ y_norm, vx_norm, vy_norm, on_ground, double_jump_ready, boosted, combo_norm,
        floor@60, floor@160, floor@260, food_dx, food_dy ]
    - y_norm, floor@k, combo_norm, flags in [0,1]; floor sentinel 1.0 = no platform
    - vx_norm, vy_norm, food_dx, food_dy in [-1,1]
    """
    p = world.player
    feats: List[float] = [
        _clamp(p.y / HEIGHT, 0.0, 1.0),
        _clamp(p.vx / VX_MAX, -1.0, 1.0),
        _clamp(p.vy / VY_MAX, -1.0, 1.0),
        1.0 if p.on_ground else 0.0,
        1.0 if (world.double_jump_unlocked and not p.double_jump_used) else 0.0,
        1.0 if world.collectibles.boosted else 0.0,
        world.combo.multiplier / COMBO_MAX_MULTIPLIER if world.combo.count else 0.0,
    ]

    base_x = p.x + p.width
    for dx in probe_offsets:
        top = _surface_at_x(world.level.platforms, base_x + dx)
        feats.append(1.0 if top is None else _clamp(top / HEIGHT, 0.0, 1.0))

    feats.extend(_nearest_food_ahead(world))
    return np.asarray(feats, dtype=np.float32)
