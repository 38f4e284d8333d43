# src/platformer/shop.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Set, Tuple

from .config import COLOR_PLAYER, COLOR_BG, COLOR_PLAT
from .effects import (
    EffectSpec, Slot, TrailSpec, SmokeSpec, SparkleSpec, ShockSpec, HaloSpec,
    BurstSpec, ConfettiSpec, OrbitSpec,
)
from .level import PlatformKind

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

CATEGORIES = ("player", "background", "platform")
NO_EFFECT = "none"


@dataclass(frozen=True)
class Skin:
    skin_id: str
    name: str
    price: int
    color: RGB


@dataclass(frozen=True)
class Effect:
    effect_id: str
    name: str
    price: int
    slots: FrozenSet[Slot]
    spec: Optional[EffectSpec]


SKINS: Dict[str, Dict[str, Skin]] = {
    "player": {s.skin_id: s for s in (
        Skin("player_default", "Graphite", 0, COLOR_PLAYER),
        Skin("player_red", "Crimson", 100, (220, 50, 60)),
        Skin("player_blue", "Cobalt", 100, (50, 90, 220)),
        Skin("player_green", "Lime", 150, (90, 200, 70)),
        Skin("player_gold", "Gold", 500, (240, 190, 40)),
    )},
    "background": {s.skin_id: s for s in (
        Skin("bg_default", "Fog", 0, COLOR_BG),
        Skin("bg_night", "Night", 200, (20, 24, 48)),
        Skin("bg_sunset", "Sunset", 250, (250, 170, 120)),
        Skin("bg_mint", "Mint", 250, (190, 240, 210)),
    )},
    "platform": {s.skin_id: s for s in (
        Skin("plat_default", "Slate", 0, COLOR_PLAT),
        Skin("plat_wood", "Wood", 150, (140, 95, 55)),
        Skin("plat_ice", "Ice", 200, (150, 210, 235)),
        Skin("plat_lava", "Lava", 300, (200, 70, 30)),
    )},
}

DEFAULT_SKINS: Dict[str, str] = {
    "player": "player_default",
    "background": "bg_default",
    "platform": "plat_default",
}

_RUN = frozenset({Slot.RUN})
_JUMP = frozenset({Slot.JUMP})
_BOTH = frozenset({Slot.RUN, Slot.JUMP})
_RAINBOW = ((255, 80, 80), (255, 200, 60), (90, 220, 90), (80, 160, 255), (190, 100, 255))

EFFECTS: Dict[str, Effect] = {e.effect_id: e for e in (
    Effect(NO_EFFECT, "None", 0, frozenset(), None),
    Effect("dust_trail", "Dust Trail", 200, _RUN, TrailSpec(color=(150, 130, 100))),
    Effect("smoke", "Smoke", 250, _RUN, SmokeSpec(color=(120, 120, 120))),
    Effect("sparkle", "Sparkle", 400, _BOTH, SparkleSpec(colors=((255, 255, 200), (255, 230, 120)))),
    Effect("shockwave", "Shockwave", 300, _JUMP, ShockSpec(color=(200, 230, 255))),
    Effect("halo", "Halo", 350, _JUMP, HaloSpec(color=(255, 240, 150))),
    Effect("star_burst", "Star Burst", 450, _JUMP, BurstSpec(colors=((255, 220, 80), (255, 255, 255)))),
    Effect("confetti", "Confetti", 500, _JUMP, ConfettiSpec(palette=_RAINBOW)),
    Effect("orbit", "Orbit", 800, _BOTH, OrbitSpec(color=(120, 200, 255))),
)}

# Platform kinds are tinted from the selected platform colour
_KIND_TINT: Dict[PlatformKind, RGB] = {
    PlatformKind.NORMAL: (0, 0, 0),
    PlatformKind.MOVING: (20, 20, 20),
    PlatformKind.MOVING_VERTICAL: (0, 20, 40),
    PlatformKind.BOUNCY: (40, 0, 30),
}


def resolve_effect(effect_id: Optional[str]) -> Optional[Effect]:
    return EFFECTS.get(effect_id) if effect_id is not None else None


def item_price(item_id: str) -> Optional[int]:
    for skins in SKINS.values():
        if item_id in skins:
            return skins[item_id].price
    if item_id in EFFECTS:
        return EFFECTS[item_id].price
    return None


def _free_items() -> Set[str]:
    return set(DEFAULT_SKINS.values()) | {NO_EFFECT}


@dataclass
class Cosmetics:
    """Owned items and the current skin/effect selection."""
    purchased: Set[str] = field(default_factory=_free_items)
    selected_skins: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SKINS))
    selected_effects: Dict[Slot, str] = field(
        default_factory=lambda: {Slot.RUN: NO_EFFECT, Slot.JUMP: NO_EFFECT})

    def owns(self, item_id: str) -> bool:
        return item_id in self.purchased

    def purchase(self, item_id: str, score: int) -> Tuple[bool, int]:
        """Buy an item. Returns (ok, score after the purchase)."""
        price = item_price(item_id)
        if price is None:
            logger.debug("purchase of unknown item %r ignored", item_id)
            return False, score
        if self.owns(item_id) or score < price:
            return False, score
        self.purchased.add(item_id)
        return True, score - price

    def select_skin(self, category: str, skin_id: str) -> bool:
        if skin_id not in SKINS[category] or not self.owns(skin_id):
            return False
        self.selected_skins[category] = skin_id
        return True

    def equip_effect(self, effect_id: str) -> bool:
        """Exclusive equip: clear both slots, then fill the ones the effect declares."""
        effect = resolve_effect(effect_id)
        if effect is None or not self.owns(effect_id):
            return False
        for slot in Slot:
            self.selected_effects[slot] = NO_EFFECT
        for slot in effect.slots:
            self.selected_effects[slot] = effect_id
        return True

    def effect_for(self, slot: Slot) -> Optional[Effect]:
        return resolve_effect(self.selected_effects.get(slot, NO_EFFECT))

    def spec_for(self, slot: Slot) -> Optional[EffectSpec]:
        effect = self.effect_for(slot)
        return effect.spec if effect is not None else None

    def orbit_spec(self) -> Optional[OrbitSpec]:
        for slot in Slot:
            spec = self.spec_for(slot)
            if isinstance(spec, OrbitSpec):
                return spec
        return None

    def color(self, category: str) -> RGB:
        return SKINS[category][self.selected_skins[category]].color

    def platform_color(self, kind: PlatformKind) -> RGB:
        r, g, b = self.color("platform")
        tr, tg, tb = _KIND_TINT[kind]
        return min(255, r + tr), min(255, g + tg), min(255, b + tb)

    # -------------------- Persistence --------------------

    def snapshot(self) -> dict:
        return {
            "selected_skins": dict(self.selected_skins),
            "purchased": sorted(self.purchased),
            "colors": {c: list(self.color(c)) for c in CATEGORIES},
            "selected_effects": {slot.value: eid for slot, eid in self.selected_effects.items()},
        }

    @classmethod
    def restore(cls, data: dict) -> "Cosmetics":
        """Rebuild from a snapshot, substituting defaults for anything stale."""
        cos = cls()
        purchased = data.get("purchased") or []
        if isinstance(purchased, (list, tuple, set)):
            cos.purchased |= {str(i) for i in purchased if item_price(str(i)) is not None}

        skins = data.get("selected_skins") or {}
        if isinstance(skins, dict):
            for category in CATEGORIES:
                sid = skins.get(category)
                if isinstance(sid, str) and sid in SKINS[category] and cos.owns(sid):
                    cos.selected_skins[category] = sid
                elif sid is not None:
                    logger.debug("unknown %s skin %r, using default", category, sid)

        effects = data.get("selected_effects") or {}
        if isinstance(effects, dict):
            for slot in Slot:
                eid = effects.get(slot.value, NO_EFFECT)
                if not isinstance(eid, str):
                    logger.debug("malformed %s effect %r, using none", slot.value, eid)
                    eid = NO_EFFECT
                effect = resolve_effect(eid)
                if effect is None or not cos.owns(eid) or slot not in effect.slots:
                    if eid != NO_EFFECT:
                        logger.debug("stale %s effect %r, using none", slot.value, eid)
                    eid = NO_EFFECT
                cos.selected_effects[slot] = eid
        return cos
