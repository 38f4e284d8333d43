# src/tests/level_tests.py
from __future__ import annotations
import random
from collections import Counter

import pytest

from src.platformer.config import (
    WIDTH, HEIGHT, PLATFORM_MIN_GAP, PLATFORM_MIN_W, PLATFORM_MAX_W,
    START_PLATFORM_W, START_PLATFORM_COUNT,
)
from src.platformer.level import LevelGen, Platform, PlatformKind, Food


def grown_level(seed: int = 7, distance: float = 20_000.0, step: float = 300.0) -> LevelGen:
    """Walk a camera forward without evicting so the full history stays visible."""
    level = LevelGen(random.Random(seed))
    cam = 0.0
    while cam < distance:
        level.ensure_lookahead(cam)
        cam += step
    return level


def test_start_layout():
    level = LevelGen(random.Random(1))
    start = level.platforms[0]
    assert start.pid == level.start_pid
    assert (start.x, start.width, start.kind) == (0.0, START_PLATFORM_W, PlatformKind.NORMAL)
    assert len(level.platforms) == 1 + START_PLATFORM_COUNT
    assert all(f.platform_id != level.start_pid for f in level.foods), "no food on the start platform"


def test_platforms_ordered_with_min_gap():
    level = grown_level()
    plats = level.platforms
    assert len(plats) > 50
    for prev, cur in zip(plats, plats[1:]):
        assert cur.origin_x >= prev.origin_x, "spawn order must follow x"
        gap = cur.origin_x - (prev.origin_x + prev.width)
        assert gap >= PLATFORM_MIN_GAP, f"gap {gap:.1f} between {prev.pid} and {cur.pid}"
        assert cur.pid == prev.pid + 1


def test_generated_dimensions():
    level = grown_level(seed=3)
    for plat in level.platforms[1:]:
        assert PLATFORM_MIN_W <= plat.width <= PLATFORM_MAX_W
        assert HEIGHT - 300 < plat.origin_y <= HEIGHT - 150


def test_lookahead_invariant():
    level = LevelGen(random.Random(2))
    for cam in (0.0, 123.0, 900.0, 4000.0, 4001.0):
        level.ensure_lookahead(cam)
        assert level.last_platform_end - cam >= 2 * WIDTH
    assert level.ensure_lookahead(4001.0) == 0, "nothing to add once satisfied"


def test_kind_distribution():
    level = LevelGen(random.Random(11))
    for _ in range(4000):
        level.generate_platform()
    kinds = Counter(p.kind for p in level.platforms[1 + START_PLATFORM_COUNT:])
    n = sum(kinds.values())
    assert kinds[PlatformKind.MOVING] / n == pytest.approx(0.15, abs=0.03)
    assert kinds[PlatformKind.BOUNCY] / n == pytest.approx(0.10, abs=0.03)
    assert kinds[PlatformKind.MOVING_VERTICAL] / n == pytest.approx(0.10, abs=0.03)
    assert kinds[PlatformKind.NORMAL] / n == pytest.approx(0.65, abs=0.03)

    for plat in level.platforms:
        if plat.kind == PlatformKind.BOUNCY:
            assert plat.bounce_strength < 0
        if plat.kind in (PlatformKind.MOVING, PlatformKind.MOVING_VERTICAL):
            assert plat.move_speed > 0 and plat.move_range > 0


def test_at_most_one_food_per_platform():
    level = grown_level(seed=5)
    target = level.platforms[10]
    for _ in range(5):
        level.spawn_food(target)
    for _ in range(200):
        level.request_food(camera_x=0.0, allow_in_view=True)
    counts = Counter(f.platform_id for f in level.foods)
    assert counts, "some food should exist"
    assert max(counts.values()) == 1


def test_replacement_food_only_beyond_view():
    level = grown_level(seed=9, distance=3000.0)
    cam = 1500.0
    for _ in range(200):
        food = level.request_food(cam)
        if food is not None:
            assert food.x > cam + WIDTH


def test_moving_platform_oscillates_within_range():
    plat = Platform(pid=0, x=500.0, y=300.0, width=100.0, kind=PlatformKind.MOVING,
                    move_speed=1.5, move_range=60.0, origin_x=500.0, origin_y=300.0)
    flips = 0
    last_dir = plat.direction
    for _ in range(400):
        dx, dy = plat.update_movement()
        assert dy == 0.0 and abs(dx) == pytest.approx(1.5)
        assert abs(plat.x - plat.origin_x) <= plat.move_range + plat.move_speed
        if plat.direction != last_dir:
            flips += 1
            last_dir = plat.direction
    assert flips >= 4


def test_items_ride_moving_platforms():
    level = LevelGen(random.Random(0))
    plat = Platform(pid=99, x=0.0, y=300.0, width=100.0, kind=PlatformKind.MOVING_VERTICAL,
                    move_speed=1.0, move_range=50.0, origin_x=0.0, origin_y=300.0)
    level.platforms = [plat]
    level.foods = [Food(x=10.0, y=275.0, platform_id=99)]
    level.power_ups = []
    deltas = level.update_platforms()
    assert deltas == {99: (0.0, 1.0)}
    assert level.foods[0].y == pytest.approx(276.0)


def test_eviction_keeps_arena_lookup():
    level = LevelGen(random.Random(4))
    cam = 6000.0
    level.ensure_lookahead(cam)
    first_pid = level.platforms[0].pid
    removed = level.evict_behind(cam)
    assert removed > 0
    assert all(p.right >= cam - WIDTH for p in level.platforms)
    assert level.platform_by_id(first_pid) is None
    for p in level.platforms:
        assert level.platform_by_id(p.pid) is p
    live = {p.pid for p in level.platforms}
    assert all(f.platform_id in live for f in level.foods)
    assert all(pu.platform_id in live for pu in level.power_ups)
    assert level.platform_by_id(None) is None


@pytest.mark.parametrize("seed", [1, 2, 3, 8])
def test_moving_platforms_never_close_the_gap(seed):
    level = grown_level(seed=seed, distance=8000.0)
    assert any(p.kind == PlatformKind.MOVING for p in level.platforms)
    for tick in range(400):
        level.update_platforms()
        for prev, cur in zip(level.platforms, level.platforms[1:]):
            gap = cur.x - prev.right
            assert gap >= PLATFORM_MIN_GAP - 1e-6, f"tick {tick}: {prev.pid}/{cur.pid} gap {gap:.2f}"


def test_start_platform_follows_viewport_height():
    level = LevelGen(random.Random(1), viewport_height=720)
    start = level.platform_by_id(level.start_pid)
    assert start.y == 720 - 300
    for plat in level.platforms[1:]:
        assert 720 - 300 < plat.origin_y <= 720 - 150


def test_replacement_food_inside_view_leaves_existing_food():
    level = LevelGen(random.Random(6))
    before = [(f.platform_id, f.x) for f in level.foods]
    assert before
    far_camera = level.last_platform_end + 10_000.0
    for _ in range(50):
        assert level.request_food(far_camera) is None
    assert [(f.platform_id, f.x) for f in level.foods] == before
