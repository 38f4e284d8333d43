# src/platformer/collectibles.py
from __future__ import annotations
from dataclasses import dataclass

from .config import (
    COMBO_WINDOW_TICKS, COMBO_MAX_MULTIPLIER, FOOD_POINTS,
    SPEED_BOOST_TICKS, FOOD_BURST_COUNT, POWERUP_BURST_COUNT,
    COLOR_FOOD_BURST, COLOR_POWERUP,
)
from .effects import EffectEngine
from .level import LevelGen
from .player import Player


@dataclass
class ComboState:
    count: int = 0
    timer: int = 0
    multiplier: int = 1

    def tick(self):
        """Count the window down; an expired window resets the combo."""
        if self.timer > 0:
            self.timer -= 1
            if self.timer == 0:
                self.count = 0
                self.multiplier = 1

    def register(self) -> int:
        """Record a pickup and return the points it is worth."""
        self.count += 1
        self.timer = COMBO_WINDOW_TICKS
        self.multiplier = min(self.count, COMBO_MAX_MULTIPLIER)
        return FOOD_POINTS * self.multiplier

    def reset(self):
        self.count, self.timer, self.multiplier = 0, 0, 1


@dataclass
class PickupResult:
    points: int = 0
    foods: int = 0
    power_up: bool = False


@dataclass
class CollectibleSystem:
    combo: ComboState
    boost_ticks: int = 0

    @property
    def boosted(self) -> bool:
        return self.boost_ticks > 0

    def tick_timers(self):
        self.combo.tick()
        if self.boost_ticks > 0:
            self.boost_ticks -= 1

    def reset(self):
        self.combo.reset()
        self.boost_ticks = 0

    def check_pickups(self, player: Player, level: LevelGen, effects: EffectEngine,
                      camera_x: float) -> PickupResult:
        """Collect every food and power-up overlapping the player this tick."""
        result = PickupResult()

        for food in list(level.foods):
            if not player.overlaps(food.x, food.y, food.size, food.size):
                continue
            level.foods.remove(food)
            result.points += self.combo.register()
            result.foods += 1
            cx, cy = food.center
            effects.burst(cx, cy, FOOD_BURST_COUNT, (COLOR_FOOD_BURST,))
            level.request_food(camera_x)

        for pu in list(level.power_ups):
            if not player.overlaps(pu.x, pu.y, pu.size, pu.size):
                continue
            level.power_ups.remove(pu)
            # re-pickup restarts the timer, it does not stack
            self.boost_ticks = SPEED_BOOST_TICKS
            result.power_up = True
            cx, cy = pu.center
            effects.burst(cx, cy, POWERUP_BURST_COUNT, (COLOR_POWERUP, (255, 255, 255)),
                          speed_min=2.0, speed_max=5.0, size=4.0, life=35)
        return result
