# src/tests/physics_tests.py
"""
Player kinematics and collision resolution.

Usage (from repo root):
  pytest src/tests/physics_tests.py
"""
from __future__ import annotations
import random

import pygame
import pytest

from src.platformer.input_state import InputState
from src.platformer.level import LevelGen, Platform, PlatformKind
from src.platformer.player import Player, JUMP, DOUBLE_JUMP, BOUNCE


def keys(*held) -> InputState:
    inp = InputState()
    for k in held:
        inp.press(k)
    return inp


def level_with(*platforms: Platform) -> LevelGen:
    level = LevelGen(random.Random(0))
    level.platforms = list(platforms)
    level.foods = []
    level.power_ups = []
    return level


def ground(pid=0, x=0.0, y=240.0, w=400.0, kind=PlatformKind.NORMAL, **kw) -> Platform:
    return Platform(pid=pid, x=x, y=y, width=w, kind=kind, origin_x=x, origin_y=y, **kw)


def standing_player(plat: Platform, x: float = 100.0) -> Player:
    return Player(x=x, y=plat.y - 20, on_ground=True, standing_on=plat.pid)


def test_first_tick_applies_gravity_only():
    p = Player()
    events = p.step(keys(), level_with(), camera_x=0.0)
    assert events == []
    assert p.vy == pytest.approx(0.5), "gravity should add 0.5 to vy"
    assert p.vx == 0.0, "friction on zero velocity stays zero"
    assert p.y == pytest.approx(50.5)
    assert p.x == pytest.approx(100.0)
    assert p.rotation == pytest.approx(0.1), "airborne player spins"


def test_grounded_jump():
    plat = ground()
    p = standing_player(plat)
    events = p.step(keys(pygame.K_SPACE), level_with(plat), camera_x=0.0)
    assert events == [JUMP]
    assert p.vy == pytest.approx(-11.5)
    assert p.on_ground is False
    assert p.standing_on is None


def test_friction_and_steering():
    p = Player(vx=5.0)
    p.step(keys(), level_with(), camera_x=0.0)
    assert p.vx == pytest.approx(4.0), "vx decays by 0.8 without input"

    p = Player()
    p.step(keys(pygame.K_d), level_with(), camera_x=0.0)
    assert p.vx == pytest.approx(5.0)

    p = Player()
    p.step(keys(pygame.K_RIGHT), level_with(), camera_x=0.0, boosted=True)
    assert p.vx == pytest.approx(9.0), "speed boost multiplies move speed by 1.8"

    p = Player(x=200.0)
    p.step(keys(pygame.K_LEFT, pygame.K_RIGHT), level_with(), camera_x=0.0)
    assert p.vx == pytest.approx(-5.0), "left wins when both are held"


def test_landing_zeroes_vy_and_grounds():
    plat = ground()
    p = Player(x=100.0, y=215.0, vy=5.0)
    p.step(keys(), level_with(plat), camera_x=0.0)
    assert p.y == pytest.approx(220.0), "snapped onto the platform top"
    assert p.vy == 0.0
    assert p.on_ground is True
    assert p.standing_on == plat.pid


def test_standing_is_stable():
    plat = ground()
    p = standing_player(plat)
    level = level_with(plat)
    for _ in range(30):
        p.step(keys(), level, camera_x=0.0)
        assert p.y == pytest.approx(220.0)
        assert p.on_ground and p.rotation == 0.0


def test_bouncy_platform_launches():
    plat = ground(kind=PlatformKind.BOUNCY, bounce_strength=-15.0)
    p = Player(x=100.0, y=215.0, vy=5.0)
    events = p.step(keys(), level_with(plat), camera_x=0.0)
    assert events == [BOUNCE]
    assert p.vy == pytest.approx(-15.0)
    assert p.on_ground is False
    assert p.standing_on is None


def test_hit_from_below():
    plat = ground(y=200.0)
    p = Player(x=100.0, y=225.0, vy=-10.0)
    p.step(keys(), level_with(plat), camera_x=0.0)
    assert p.y == pytest.approx(220.0), "pushed under the platform bottom"
    assert p.vy == 0.0
    assert p.on_ground is False


def test_side_hits():
    plat = ground(x=200.0, y=100.0, w=100.0)

    p = Player(x=185.0, y=100.0)
    p.step(keys(pygame.K_RIGHT), level_with(plat), camera_x=0.0)
    assert p.x == pytest.approx(180.0), "stopped at the left edge"
    assert p.vx == 0.0

    p = Player(x=303.0, y=100.0)
    p.step(keys(pygame.K_LEFT), level_with(plat), camera_x=0.0)
    assert p.x == pytest.approx(300.0), "stopped at the right edge"
    assert p.vx == 0.0


def test_carried_by_moving_platforms():
    plat = ground(kind=PlatformKind.MOVING, move_speed=1.5, move_range=60.0)
    p = standing_player(plat)
    p.step(keys(), level_with(plat), camera_x=0.0)
    assert plat.x == pytest.approx(1.5)
    assert p.x == pytest.approx(101.5), "horizontal platform carries the player"
    assert p.on_ground and p.standing_on == plat.pid

    plat = ground(kind=PlatformKind.MOVING_VERTICAL, move_speed=1.0, move_range=50.0)
    p = standing_player(plat)
    p.step(keys(), level_with(plat), camera_x=0.0)
    assert plat.y == pytest.approx(241.0)
    assert p.y == pytest.approx(221.0), "vertical platform carries the player"
    assert p.on_ground


def test_double_jump_needs_unlock_and_fresh_press():
    level = level_with()

    p = Player(y=100.0, vy=2.0)
    inp = keys(pygame.K_SPACE)
    assert p.step(inp, level, camera_x=0.0) == [], "locked double jump"

    p = Player(y=100.0, vy=2.0)
    inp = keys(pygame.K_SPACE)
    events = p.step(inp, level, camera_x=0.0, double_jump_unlocked=True)
    assert events == [DOUBLE_JUMP]
    assert p.vy == pytest.approx(-12.0 * 0.9 + 0.5)
    assert p.double_jump_used

    # holding does not retrigger; a new press does not either (charge spent)
    inp.end_tick()
    assert p.step(inp, level, camera_x=0.0, double_jump_unlocked=True) == []
    inp.release(pygame.K_SPACE)
    inp.end_tick()
    inp.press(pygame.K_SPACE)
    assert p.step(inp, level, camera_x=0.0, double_jump_unlocked=True) == []


def test_landing_refreshes_double_jump():
    plat = ground()
    p = Player(x=100.0, y=215.0, vy=5.0, double_jump_used=True)
    p.step(keys(), level_with(plat), camera_x=0.0, double_jump_unlocked=True)
    assert p.on_ground and not p.double_jump_used


def test_player_never_behind_camera():
    p = Player(x=50.0, y=100.0)
    p.step(keys(pygame.K_LEFT), level_with(), camera_x=80.0)
    assert p.x == pytest.approx(80.0)

    p = Player(x=2.0, y=100.0)
    p.step(keys(pygame.K_LEFT), level_with(), camera_x=0.0)
    assert p.x == 0.0
