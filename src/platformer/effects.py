# src/platformer/effects.py
"""
Particle and orbiter engine.

Effect behaviour is a tagged variant: every effect kind has its own frozen
parameter record and spawning dispatches on the record's class. Particles
are short-lived and fade linearly; orbiters are a persistent ring ensemble
that is only ever replaced as a whole.
"""
from __future__ import annotations
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from .config import (
    PARTICLE_GRAVITY, MAX_PARTICLES, RUN_SPEED_THRESHOLD, ORBIT_VISIBLE_SPEED,
)

RGB = Tuple[int, int, int]


class EffectKind(str, Enum):
    TRAIL = "trail"
    SMOKE = "smoke"
    SPARKLE = "sparkle"
    SHOCK = "shock"
    HALO = "halo"
    BURST = "burst"
    CONFETTI = "confetti"
    ORBIT = "orbit"


class Slot(str, Enum):
    RUN = "run"     # grounded and moving
    JUMP = "jump"   # airborne


# --- Per-kind parameter records ---

@dataclass(frozen=True)
class TrailSpec:
    color: RGB
    frequency: int = 2      # frames between spawns
    size: float = 4.0
    life: int = 20
    spread: float = 0.6

@dataclass(frozen=True)
class SmokeSpec:
    color: RGB
    frequency: int = 4
    size: float = 7.0
    life: int = 35
    rise: float = 1.6

@dataclass(frozen=True)
class SparkleSpec:
    colors: Tuple[RGB, ...]
    frequency: int = 3
    count: int = 2
    size: float = 3.0
    life: int = 25

@dataclass(frozen=True)
class ShockSpec:
    color: RGB
    count: int = 16
    speed: float = 4.0
    size: float = 3.0
    life: int = 18

@dataclass(frozen=True)
class HaloSpec:
    color: RGB
    frequency: int = 2
    radius: float = 18.0
    size: float = 2.5
    life: int = 15

@dataclass(frozen=True)
class BurstSpec:
    colors: Tuple[RGB, ...]
    count: int = 20
    speed_min: float = 2.0
    speed_max: float = 6.0
    size: float = 3.5
    life: int = 30

@dataclass(frozen=True)
class ConfettiSpec:
    palette: Tuple[RGB, ...]
    count: int = 30
    size: float = 4.0
    life: int = 60

@dataclass(frozen=True)
class OrbitSpec:
    color: RGB
    rings: int = 2
    per_ring: int = 4
    base_radius: float = 20.0
    ring_spacing: float = 10.0
    angular_speed: float = 0.08
    length: float = 6.0
    thickness: float = 2.0


EffectSpec = Union[TrailSpec, SmokeSpec, SparkleSpec, ShockSpec, HaloSpec,
                   BurstSpec, ConfettiSpec, OrbitSpec]


def kind_of(spec: EffectSpec) -> EffectKind:
    match spec:
        case TrailSpec():
            return EffectKind.TRAIL
        case SmokeSpec():
            return EffectKind.SMOKE
        case SparkleSpec():
            return EffectKind.SPARKLE
        case ShockSpec():
            return EffectKind.SHOCK
        case HaloSpec():
            return EffectKind.HALO
        case BurstSpec():
            return EffectKind.BURST
        case ConfettiSpec():
            return EffectKind.CONFETTI
        case OrbitSpec():
            return EffectKind.ORBIT
    raise TypeError(f"unknown effect spec {spec!r}")


def fires_once(spec: EffectSpec) -> bool:
    """One-shot kinds fire on the trigger edge; the rest spawn at a frequency."""
    return kind_of(spec) in (EffectKind.SHOCK, EffectKind.BURST, EffectKind.CONFETTI)


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: int
    size: float
    color: RGB
    max_life: int = 0

    def __post_init__(self):
        if self.max_life <= 0:
            self.max_life = self.life

    @property
    def alpha(self) -> float:
        return max(0.0, self.life / self.max_life)

    def update(self) -> bool:
        """Advance one tick. Returns True once the particle is exhausted."""
        self.x += self.vx
        self.y += self.vy
        self.vy += PARTICLE_GRAVITY
        self.life -= 1
        return self.life <= 0


@dataclass
class Orbiter:
    angle: float
    radius: float
    angular_speed: float
    length: float
    thickness: float
    color: RGB

    def position(self, cx: float, cy: float) -> Tuple[float, float]:
        return cx + math.cos(self.angle) * self.radius, cy + math.sin(self.angle) * self.radius


def build_orbiters(spec: OrbitSpec) -> List[Orbiter]:
    """Ring ensemble; odd rings spin the other way."""
    out: List[Orbiter] = []
    for ring in range(spec.rings):
        sign = 1.0 if ring % 2 == 0 else -1.0
        radius = spec.base_radius + ring * spec.ring_spacing
        for i in range(spec.per_ring):
            out.append(Orbiter(
                angle=2 * math.pi * i / spec.per_ring,
                radius=radius,
                angular_speed=sign * spec.angular_speed,
                length=spec.length,
                thickness=spec.thickness,
                color=spec.color,
            ))
    return out


@dataclass
class EffectEngine:
    rng: random.Random
    particles: List[Particle] = field(default_factory=list)
    orbiters: List[Orbiter] = field(default_factory=list)
    frame: int = 0
    _was_running: bool = False

    def clear(self):
        self.particles.clear()
        self.frame = 0
        self._was_running = False

    # -------------------- Spawning --------------------

    def spawn(self, x: float, y: float, vx: float, vy: float, life: int,
              size: float, color: RGB) -> Particle:
        p = Particle(x=x, y=y, vx=vx, vy=vy, life=life, size=size, color=color)
        self.particles.append(p)
        if len(self.particles) > MAX_PARTICLES:
            del self.particles[: len(self.particles) - MAX_PARTICLES]
        return p

    def burst(self, x: float, y: float, count: int, colors: Sequence[RGB],
              speed_min: float = 1.0, speed_max: float = 4.0,
              size: float = 3.0, life: int = 25):
        """Radial burst used by pickups and the burst effect."""
        for _ in range(count):
            a = self.rng.random() * 2 * math.pi
            s = speed_min + self.rng.random() * (speed_max - speed_min)
            self.spawn(x, y, math.cos(a) * s, math.sin(a) * s, life, size,
                       colors[self.rng.randrange(len(colors))])

    def emit(self, spec: EffectSpec, player):
        """Spawn one batch of particles for `spec` around the player."""
        cx, cy = player.center
        feet = player.y + player.height
        rng = self.rng
        match spec:
            case TrailSpec(color=color, size=size, life=life, spread=spread):
                tail = player.x if player.vx > 0 else player.x + player.width
                self.spawn(tail, feet - size, -player.vx * 0.2 + (rng.random() - 0.5) * spread,
                           -rng.random() * spread, life, size, color)
            case SmokeSpec(color=color, size=size, life=life, rise=rise):
                self.spawn(cx + (rng.random() - 0.5) * player.width, feet,
                           (rng.random() - 0.5) * 0.8, -rise - rng.random(), life, size, color)
            case SparkleSpec(colors=colors, count=count, size=size, life=life):
                for _ in range(count):
                    self.spawn(player.x + rng.random() * player.width,
                               player.y + rng.random() * player.height,
                               (rng.random() - 0.5) * 1.5, (rng.random() - 0.5) * 1.5 - 0.5,
                               life, size, colors[rng.randrange(len(colors))])
            case ShockSpec(color=color, count=count, speed=speed, size=size, life=life):
                # flat ring expanding along the ground
                for i in range(count):
                    a = 2 * math.pi * i / count
                    self.spawn(cx, feet, math.cos(a) * speed, math.sin(a) * speed * 0.3 - 0.5,
                               life, size, color)
            case HaloSpec(color=color, radius=radius, size=size, life=life):
                a = rng.random() * 2 * math.pi
                self.spawn(cx + math.cos(a) * radius, cy + math.sin(a) * radius,
                           player.vx * 0.5, player.vy * 0.5 - PARTICLE_GRAVITY, life, size, color)
            case BurstSpec(colors=colors, count=count, speed_min=lo, speed_max=hi, size=size, life=life):
                self.burst(cx, cy, count, colors, lo, hi, size, life)
            case ConfettiSpec(palette=palette, count=count, size=size, life=life):
                for _ in range(count):
                    self.spawn(cx, cy, (rng.random() - 0.5) * 6.0, -2.0 - rng.random() * 5.0,
                               life, size, palette[rng.randrange(len(palette))])
            case OrbitSpec():
                pass  # orbiters are an ensemble, see set_orbit()

    def set_orbit(self, spec: Optional[OrbitSpec]):
        """Replace the orbiter ensemble wholesale (None clears it)."""
        self.orbiters = build_orbiters(spec) if spec is not None else []

    # -------------------- Per-tick update --------------------

    def _trigger(self, spec: Optional[EffectSpec], active: bool, edge: bool, player):
        if spec is None or isinstance(spec, OrbitSpec):
            return
        if fires_once(spec):
            if edge:
                self.emit(spec, player)
        elif active and self.frame % max(1, spec.frequency) == 0:
            self.emit(spec, player)

    def update(self, player, run_spec: Optional[EffectSpec] = None,
               jump_spec: Optional[EffectSpec] = None, jumped: bool = False):
        """Fire slot triggers, then age particles and spin orbiters."""
        self.frame += 1
        running = player.on_ground and abs(player.vx) > RUN_SPEED_THRESHOLD
        airborne = not player.on_ground

        self._trigger(run_spec, running, running and not self._was_running, player)
        self._trigger(jump_spec, airborne, jumped, player)
        self._was_running = running

        self.age()
        for orb in self.orbiters:
            orb.angle += orb.angular_speed

    def age(self):
        self.particles = [p for p in self.particles if not p.update()]

    def orbiters_visible(self, player) -> bool:
        return bool(self.orbiters) and (not player.on_ground or abs(player.vx) > ORBIT_VISIBLE_SPEED)
