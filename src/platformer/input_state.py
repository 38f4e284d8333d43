# src/platformer/input_state.py
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict

from .config import LEFT_KEYS, RIGHT_KEYS, JUMP_KEYS, CHEAT_CODE


@dataclass
class InputState:
    """
    Keys currently held (pygame key code -> bool) plus a short rolling
    buffer of typed characters for the cheat code.
    The only logic here is the jump edge, latched once per tick by end_tick().
    """
    keys: Dict[int, bool] = field(default_factory=dict)
    typed: Deque[str] = field(default_factory=lambda: deque(maxlen=len(CHEAT_CODE)))
    _jump_prev: bool = False

    def press(self, key: int):
        self.keys[key] = True

    def release(self, key: int):
        self.keys[key] = False

    def clear(self):
        self.keys.clear()
        self._jump_prev = False

    def _any(self, group) -> bool:
        return any(self.keys.get(k, False) for k in group)

    @property
    def left_held(self) -> bool:
        return self._any(LEFT_KEYS)

    @property
    def right_held(self) -> bool:
        return self._any(RIGHT_KEYS)

    @property
    def jump_held(self) -> bool:
        return self._any(JUMP_KEYS)

    @property
    def jump_pressed(self) -> bool:
        """Jump held now but not on the previous tick."""
        return self.jump_held and not self._jump_prev

    def end_tick(self):
        self._jump_prev = self.jump_held

    def type_char(self, ch: str) -> bool:
        """Feed one printable character; True when the buffer spells the cheat."""
        if len(ch) != 1 or not ch.isprintable():
            return False
        self.typed.append(ch.lower())
        if "".join(self.typed) == CHEAT_CODE:
            self.typed.clear()
            return True
        return False
