# src/platformer/level.py
from __future__ import annotations
import math
import random
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import pygame

from .config import (
    WIDTH, HEIGHT, PLATFORM_THICKNESS,
    START_PLATFORM_W, START_PLATFORM_RISE, START_PLATFORM_COUNT,
    PLATFORM_MIN_W, PLATFORM_MAX_W, PLATFORM_MIN_GAP, PLATFORM_GAP_JITTER,
    PLATFORM_BAND_LOW, PLATFORM_BAND_SPAN, LOOKAHEAD_SCREENS, EVICT_BEHIND_PX,
    MOVING_THRESHOLD, BOUNCY_THRESHOLD, MOVING_VERTICAL_THRESHOLD,
    MOVING_PLATFORM_SPEED, MOVING_PLATFORM_RANGE,
    MOVING_VERTICAL_SPEED, MOVING_VERTICAL_RANGE, BOUNCE_STRENGTH,
    FOOD_SIZE, FOOD_OFFSET_Y, FOOD_CHANCE_MIN, FOOD_CHANCE_MAX,
    FOOD_BOUNCE_RATE, FOOD_BOUNCE_AMPLITUDE,
    POWERUP_CHANCE, POWERUP_SIZE, POWERUP_OFFSET_Y, POWERUP_SPIN_RATE,
)

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


class PlatformKind(str, Enum):
    NORMAL = "normal"
    MOVING = "moving"                    # horizontal oscillation
    MOVING_VERTICAL = "moving_vertical"
    BOUNCY = "bouncy"


@dataclass
class Platform:
    pid: int
    x: float
    y: float
    width: float
    height: float = PLATFORM_THICKNESS
    kind: PlatformKind = PlatformKind.NORMAL
    move_speed: float = 0.0
    move_range: float = 0.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    direction: int = 1
    bounce_strength: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))

    def update_movement(self) -> Tuple[float, float]:
        """Advance a moving platform one tick. Returns its (dx, dy)."""
        if self.kind == PlatformKind.MOVING:
            step = self.move_speed * self.direction
            self.x += step
            if abs(self.x - self.origin_x) > self.move_range:
                self.direction *= -1
            return step, 0.0
        if self.kind == PlatformKind.MOVING_VERTICAL:
            step = self.move_speed * self.direction
            self.y += step
            if abs(self.y - self.origin_y) > self.move_range:
                self.direction *= -1
            return 0.0, step
        return 0.0, 0.0


def horizontal_swing(plat: Platform) -> float:
    """Furthest a platform drifts sideways from its origin (it flips one step past the range)."""
    if plat.kind == PlatformKind.MOVING:
        return plat.move_range + plat.move_speed
    return 0.0


@dataclass
class Food:
    x: float
    y: float
    platform_id: int
    size: float = FOOD_SIZE
    bounce_time: float = 0.0

    @property
    def bounce_offset(self) -> float:
        return math.sin(self.bounce_time) * FOOD_BOUNCE_AMPLITUDE

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.size / 2, self.y + self.size / 2


@dataclass
class PowerUp:
    x: float
    y: float
    platform_id: int
    size: float = POWERUP_SIZE
    rotation: float = 0.0

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.size / 2, self.y + self.size / 2


class LevelGen:
    """
    Streams platforms to the right of the camera.
    Platforms are append-only and ordered by spawn x; ids are consecutive so
    the list works as an arena indexed by (pid - first pid).
    """
    def __init__(self, rng: random.Random, viewport_width: float = WIDTH,
                 viewport_height: float = HEIGHT):
        self.rng = rng
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.platforms: List[Platform] = []
        self.foods: List[Food] = []
        self.power_ups: List[PowerUp] = []
        self.last_platform_end = 0.0
        self._trailing_swing = 0.0  # horizontal reach of the last platform past its origin
        self._next_pid = 0
        self.start_pid = 0
        self._init_start()

    def _init_start(self):
        start_y = float(self.viewport_height - START_PLATFORM_RISE)
        start = self._append(Platform(
            pid=self._take_pid(), x=0.0, y=start_y,
            width=float(START_PLATFORM_W), origin_x=0.0, origin_y=start_y,
        ))
        self.start_pid = start.pid
        for _ in range(START_PLATFORM_COUNT):
            self._append(self._create_platform())
            self.request_food(camera_x=0.0, allow_in_view=True)

    # -------------------- Creation --------------------

    def _take_pid(self) -> int:
        pid = self._next_pid
        self._next_pid += 1
        return pid

    def _append(self, plat: Platform) -> Platform:
        self.platforms.append(plat)
        self.last_platform_end = plat.right
        self._trailing_swing = horizontal_swing(plat)
        return plat

    def _create_platform(self) -> Platform:
        """Roll a new platform placed after last_platform_end."""
        w = PLATFORM_MIN_W + self.rng.random() * (PLATFORM_MAX_W - PLATFORM_MIN_W)
        x = (self.last_platform_end + self._trailing_swing
             + PLATFORM_MIN_GAP + self.rng.random() * PLATFORM_GAP_JITTER)
        y = self.viewport_height - PLATFORM_BAND_LOW - self.rng.random() * PLATFORM_BAND_SPAN

        plat = Platform(pid=self._take_pid(), x=x, y=y, width=w, origin_x=x, origin_y=y)

        # One draw against cumulative thresholds
        roll = self.rng.random()
        if roll < MOVING_THRESHOLD:
            plat.kind = PlatformKind.MOVING
            plat.move_speed = MOVING_PLATFORM_SPEED
            plat.move_range = MOVING_PLATFORM_RANGE
            # shift right so the leftmost swing still clears the gap
            plat.x = plat.origin_x = x + horizontal_swing(plat)
        elif roll < BOUNCY_THRESHOLD:
            plat.kind = PlatformKind.BOUNCY
            plat.bounce_strength = BOUNCE_STRENGTH
        elif roll < MOVING_VERTICAL_THRESHOLD:
            plat.kind = PlatformKind.MOVING_VERTICAL
            plat.move_speed = MOVING_VERTICAL_SPEED
            plat.move_range = MOVING_VERTICAL_RANGE
        return plat

    def spawn_food(self, plat: Platform, min_x: Optional[float] = None) -> Optional[Food]:
        """
        Place a food on `plat`, replacing any food already sitting there.
        With `min_x`, nothing is placed unless the food lands right of it.
        """
        fx = plat.x + self.rng.random() * max(0.0, plat.width - FOOD_SIZE)
        if min_x is not None and fx <= min_x:
            return None
        self.foods = [f for f in self.foods if f.platform_id != plat.pid]
        food = Food(x=fx, y=plat.y - FOOD_OFFSET_Y, platform_id=plat.pid)
        self.foods.append(food)
        return food

    def spawn_power_up(self, plat: Platform) -> PowerUp:
        pu = PowerUp(
            x=plat.x + plat.width / 2 - POWERUP_SIZE / 2,
            y=plat.y - POWERUP_OFFSET_Y,
            platform_id=plat.pid,
        )
        self.power_ups.append(pu)
        return pu

    def request_food(self, camera_x: float, allow_in_view: bool = False) -> Optional[Food]:
        """
        Replacement food on a random non-starting platform. Unless allowed,
        it is only placed when it lands beyond the right edge of the view.
        """
        candidates = [p for p in self.platforms if p.pid != self.start_pid]
        if not candidates:
            return None
        plat = candidates[self.rng.randrange(len(candidates))]
        min_x = None if allow_in_view else camera_x + self.viewport_width
        return self.spawn_food(plat, min_x=min_x)

    def generate_platform(self) -> Platform:
        plat = self._append(self._create_platform())
        # Food chance is re-rolled for every spawn
        food_chance = FOOD_CHANCE_MIN + self.rng.random() * (FOOD_CHANCE_MAX - FOOD_CHANCE_MIN)
        if self.rng.random() < food_chance:
            self.spawn_food(plat)
        if self.rng.random() < POWERUP_CHANCE:
            self.spawn_power_up(plat)
        return plat

    def ensure_lookahead(self, camera_x: float) -> int:
        """Append platforms until 2 screens ahead of the camera are covered."""
        added = 0
        while self.last_platform_end - camera_x < self.viewport_width * LOOKAHEAD_SCREENS:
            self.generate_platform()
            added += 1
        return added

    # -------------------- Per-tick update --------------------

    def update_platforms(self) -> Dict[int, Tuple[float, float]]:
        """Move oscillating platforms and carry their food/power-ups. Returns pid -> (dx, dy)."""
        deltas: Dict[int, Tuple[float, float]] = {}
        for plat in self.platforms:
            if plat.kind in (PlatformKind.MOVING, PlatformKind.MOVING_VERTICAL):
                deltas[plat.pid] = plat.update_movement()
        if deltas:
            for item in (*self.foods, *self.power_ups):
                d = deltas.get(item.platform_id)
                if d is not None:
                    item.x += d[0]
                    item.y += d[1]
        return deltas

    def animate_items(self):
        for food in self.foods:
            food.bounce_time += FOOD_BOUNCE_RATE
        for pu in self.power_ups:
            pu.rotation += POWERUP_SPIN_RATE

    def evict_behind(self, camera_x: float) -> int:
        """Drop platforms (and their items) far behind the camera. Returns how many."""
        limit = camera_x - EVICT_BEHIND_PX
        n = 0
        while n < len(self.platforms) and self.platforms[n].right < limit:
            n += 1
        if n == 0:
            return 0
        gone = {p.pid for p in self.platforms[:n]}
        del self.platforms[:n]
        self.foods = [f for f in self.foods if f.platform_id not in gone]
        self.power_ups = [p for p in self.power_ups if p.platform_id not in gone]
        logger.debug("evicted %d platforms behind x=%.1f", n, limit)
        return n

    def platform_by_id(self, pid: Optional[int]) -> Optional[Platform]:
        if pid is None or not self.platforms:
            return None
        idx = pid - self.platforms[0].pid
        if 0 <= idx < len(self.platforms):
            return self.platforms[idx]
        return None

    # -------------------- Rendering --------------------

    def draw(self, surf: pygame.Surface, camera_x: float,
             color_for: Callable[[PlatformKind], RGB],
             food_color: RGB, power_up_color: RGB):
        """Draw visible platforms, food and power-ups in screen space."""
        for platform in self.platforms:
            sx = platform.x - camera_x
            if sx + platform.width > 0 and sx < self.viewport_width:
                pygame.draw.rect(surf, color_for(platform.kind),
                                 pygame.Rect(int(sx), int(platform.y), int(platform.width), int(platform.height)))

        for food in self.foods:
            sx = food.x - camera_x
            if sx + food.size > 0 and sx < self.viewport_width:
                pygame.draw.rect(surf, food_color,
                                 pygame.Rect(int(sx), int(food.y + food.bounce_offset), int(food.size), int(food.size)))

        for pu in self.power_ups:
            cx, cy = pu.center
            cx -= camera_x
            if -pu.size < cx < self.viewport_width + pu.size:
                half = pu.size / 2
                pts = []
                for i in range(4):
                    a = pu.rotation + i * math.pi / 2
                    pts.append((cx + math.cos(a) * half, cy + math.sin(a) * half))
                pygame.draw.polygon(surf, power_up_color, pts)
