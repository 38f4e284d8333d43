# src/platformer/world.py
from __future__ import annotations
import logging
import random
from typing import List, Optional

from .config import WIDTH, HEIGHT, CHEAT_BONUS, CHEAT_MESSAGE_TICKS
from .camera import Camera
from .collectibles import CollectibleSystem, ComboState, PickupResult
from .effects import EffectEngine, Slot
from .input_state import InputState
from .level import LevelGen
from .persistence import SaveStore
from .player import Player, JUMP, DOUBLE_JUMP, BOUNCE
from .shop import Cosmetics

logger = logging.getLogger(__name__)

RUNNING = "running"
DEAD = "dead"


class World:
    """
    Whole simulation context, advanced one tick at a time.
    Rendering and input read/write this object; nothing here waits on a clock.
    """
    def __init__(self, seed: Optional[int] = None, store: Optional[SaveStore] = None,
                 viewport_width: float = WIDTH, viewport_height: float = HEIGHT):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.seed = seed
        self.rng = random.Random(seed)
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.store = store

        self.input = InputState()
        self.player = Player()
        self.camera = Camera(viewport_width=viewport_width)
        self.level = LevelGen(self.rng, viewport_width, viewport_height)
        self.level.ensure_lookahead(self.camera.x)
        self.collectibles = CollectibleSystem(ComboState())
        self.effects = EffectEngine(self.rng)
        self.cosmetics = Cosmetics()

        self.score = 0
        self.double_jump_unlocked = False
        self.state = RUNNING
        self.ticks = 0
        self.cheat_message = ""
        self.cheat_ticks = 0
        self._save_requested = False

        if self.store is not None:
            data = self.store.load()
            if data is not None:
                self.restore(data)

    @property
    def alive(self) -> bool:
        return self.state == RUNNING

    @property
    def combo(self) -> ComboState:
        return self.collectibles.combo

    # -------------------- Simulation --------------------

    def tick(self) -> List[str]:
        """Advance the simulation by one step. Returns the player events raised."""
        self.ticks += 1
        self._tick_cheat_message()
        if not self.alive:
            # soft pause: only the visual particles keep moving
            self.effects.age()
            self._flush_save()
            return []

        self.collectibles.tick_timers()

        events = self.player.step(
            self.input, self.level, self.camera.x,
            boosted=self.collectibles.boosted,
            double_jump_unlocked=self.double_jump_unlocked,
        )

        if self.player.y > self.viewport_height:
            self.state = DEAD
            logger.info("player fell at x=%.1f, final score %d", self.player.x, self.score)
            self._flush_save()
            return events

        self.camera.follow(self.player.x)
        self.level.ensure_lookahead(self.camera.x)
        self.level.evict_behind(self.camera.x)

        self._apply_pickups(self.collectibles.check_pickups(
            self.player, self.level, self.effects, self.camera.x))

        jumped = any(e in (JUMP, DOUBLE_JUMP, BOUNCE) for e in events)
        self.effects.update(
            self.player,
            run_spec=self.cosmetics.spec_for(Slot.RUN),
            jump_spec=self.cosmetics.spec_for(Slot.JUMP),
            jumped=jumped,
        )
        self.level.animate_items()

        self.input.end_tick()
        self._flush_save()
        return events

    def run_ticks(self, n: int) -> None:
        for _ in range(n):
            self.tick()

    def _apply_pickups(self, result: PickupResult):
        if result.foods:
            self.score += result.points
            if not self.double_jump_unlocked:
                self.double_jump_unlocked = True
                logger.info("double jump unlocked")
            self.request_save()

    def _tick_cheat_message(self):
        if self.cheat_ticks > 0:
            self.cheat_ticks -= 1
            if self.cheat_ticks == 0:
                self.cheat_message = ""

    def restart(self):
        """New run on fresh terrain; score, cosmetics and unlocks carry over."""
        self.player.reset()
        self.camera.reset()
        self.level = LevelGen(self.rng, self.viewport_width, self.viewport_height)
        self.level.ensure_lookahead(self.camera.x)
        self.collectibles.reset()
        self.effects.clear()
        self.effects.set_orbit(self.cosmetics.orbit_spec())
        self.input.clear()
        self.state = RUNNING
        logger.info("restart (seed %d)", self.seed)

    # -------------------- Input producer --------------------

    def type_char(self, ch: str) -> bool:
        if not self.input.type_char(ch):
            return False
        self.score += CHEAT_BONUS
        self.cheat_message = f"+{CHEAT_BONUS} CHEAT ACTIVATED"
        self.cheat_ticks = CHEAT_MESSAGE_TICKS
        self.request_save()
        return True

    # -------------------- Shop producer --------------------

    def purchase(self, item_id: str) -> bool:
        ok, self.score = self.cosmetics.purchase(item_id, self.score)
        if ok:
            logger.info("purchased %s, score now %d", item_id, self.score)
            self.request_save()
        return ok

    def select_skin(self, category: str, skin_id: str) -> bool:
        ok = self.cosmetics.select_skin(category, skin_id)
        if ok:
            self.request_save()
        return ok

    def equip_effect(self, effect_id: str) -> bool:
        ok = self.cosmetics.equip_effect(effect_id)
        if ok:
            self.effects.set_orbit(self.cosmetics.orbit_spec())
            self.request_save()
        return ok

    # -------------------- Persistence --------------------

    def snapshot(self) -> dict:
        data = {"score": self.score, "double_jump_unlocked": self.double_jump_unlocked}
        data.update(self.cosmetics.snapshot())
        return data

    def restore(self, data: dict):
        try:
            self.score = max(0, int(data.get("score", 0)))
        except (TypeError, ValueError):
            self.score = 0
        self.double_jump_unlocked = bool(data.get("double_jump_unlocked", False))
        self.cosmetics = Cosmetics.restore(data)
        self.effects.set_orbit(self.cosmetics.orbit_spec())

    def request_save(self):
        self._save_requested = True

    def _flush_save(self):
        if not self._save_requested:
            return
        self._save_requested = False
        if self.store is not None:
            self.store.save(self.snapshot())
