# src/platformer/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import (
    PLAYER_START_X, PLAYER_START_Y, PLAYER_W, PLAYER_H,
    GRAVITY, JUMP_STRENGTH, DOUBLE_JUMP_FACTOR, MOVE_SPEED, FRICTION,
    SPIN_RATE, SPEED_BOOST_MULTIPLIER,
)
from .input_state import InputState
from .level import LevelGen, Platform, PlatformKind

# Events returned by the physics step, consumed by the effect engine
JUMP = "jump"
DOUBLE_JUMP = "double_jump"
BOUNCE = "bounce"


def overlaps(ax: float, ay: float, aw: float, ah: float,
             bx: float, by: float, bw: float, bh: float) -> bool:
    """Strict axis-aligned box overlap (touching edges do not count)."""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


@dataclass
class Player:
    """
    Side-scrolling player, y-down world coordinates.
    standing_on holds the pid of the supporting platform (never a reference).
    """
    x: float = PLAYER_START_X
    y: float = PLAYER_START_Y
    vx: float = 0.0
    vy: float = 0.0
    width: float = PLAYER_W
    height: float = PLAYER_H
    on_ground: bool = False
    rotation: float = 0.0
    standing_on: Optional[int] = None
    double_jump_used: bool = False

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))

    @property
    def center(self):
        return self.x + self.width / 2, self.y + self.height / 2

    def reset(self):
        self.x, self.y = PLAYER_START_X, PLAYER_START_Y
        self.vx = self.vy = 0.0
        self.on_ground = False
        self.rotation = 0.0
        self.standing_on = None
        self.double_jump_used = False

    def overlaps(self, x: float, y: float, w: float, h: float) -> bool:
        return overlaps(self.x, self.y, self.width, self.height, x, y, w, h)

    # -------------------- Controls --------------------

    def apply_controls(self, inp: InputState, boosted: bool = False,
                       double_jump_unlocked: bool = False) -> Optional[str]:
        """Horizontal steering and jumping. Returns a jump event name or None."""
        speed = MOVE_SPEED * (SPEED_BOOST_MULTIPLIER if boosted else 1.0)
        if inp.left_held:
            self.vx = -speed
        elif inp.right_held:
            self.vx = speed
        else:
            self.vx *= FRICTION

        if inp.jump_held and self.on_ground:
            self.vy = JUMP_STRENGTH
            self.on_ground = False
            self.standing_on = None
            self.double_jump_used = False
            return JUMP
        if (inp.jump_pressed and not self.on_ground and not self.double_jump_used
                and double_jump_unlocked):
            self.vy = JUMP_STRENGTH * DOUBLE_JUMP_FACTOR
            self.double_jump_used = True
            return DOUBLE_JUMP
        return None

    def update_physics(self):
        """Gravity, airborne spin and position integration."""
        self.vy += GRAVITY

        if not self.on_ground:
            self.rotation += SPIN_RATE
        else:
            self.rotation = 0.0

        self.x += self.vx
        self.y += self.vy

    # -------------------- Collisions --------------------

    def resolve_collisions(self, prev_y: float, platforms: Iterable[Platform]) -> Optional[str]:
        """
        First matching branch wins per platform: land on top, bump from
        below, hit from the left, hit from the right. This is not a swept
        test; fast or diagonal overlaps may tunnel.
        Returns BOUNCE when a bouncy platform launched the player.
        """
        event = None
        self.on_ground = False
        self.standing_on = None

        for plat in platforms:
            if not self.overlaps(plat.x, plat.y, plat.width, plat.height):
                continue

            if self.vy >= 0 and prev_y < plat.y:
                # Landing on top
                self.y = plat.y - self.height
                self.vy = 0.0
                self.on_ground = True
                self.standing_on = plat.pid
                self.double_jump_used = False
                if plat.kind == PlatformKind.BOUNCY:
                    self.vy = plat.bounce_strength
                    self.on_ground = False
                    self.standing_on = None
                    event = BOUNCE
            elif self.vy < 0 and self.y + self.height > plat.bottom:
                # Hitting from below
                self.y = plat.bottom
                self.vy = 0.0
            elif self.vx > 0 and self.x < plat.x:
                # Hitting from the left
                self.x = plat.x - self.width
                self.vx = 0.0
            elif self.vx < 0 and self.x + self.width > plat.right:
                # Hitting from the right
                self.x = plat.right
                self.vx = 0.0
        return event

    def clamp_to_camera(self, camera_x: float):
        if self.x < camera_x:
            self.x = camera_x
        if self.x < 0:
            self.x = 0.0

    def step(self, inp: InputState, level: LevelGen, camera_x: float,
             boosted: bool = False, double_jump_unlocked: bool = False) -> List[str]:
        """
        One full physics tick: controls, gravity, integration, moving
        platforms (carrying the player), collision and the camera boundary.
        Returns the events raised this tick.
        """
        events: List[str] = []
        ev = self.apply_controls(inp, boosted, double_jump_unlocked)
        if ev:
            events.append(ev)

        prev_y = self.y
        self.update_physics()

        # Platforms move before collision; carry the player along
        support = self.standing_on
        deltas = level.update_platforms()
        if support is not None and support in deltas:
            dx, dy = deltas[support]
            self.x += dx
            self.y += dy
            prev_y += dy

        ev = self.resolve_collisions(prev_y, level.platforms)
        if ev:
            events.append(ev)

        self.clamp_to_camera(camera_x)
        return events
