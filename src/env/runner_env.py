# src/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any, Tuple
import numpy as np
import gymnasium as gym
import pygame

from src.platformer.config import WIDTH, HEIGHT, FPS, LEFT_KEYS, RIGHT_KEYS, JUMP_KEYS
from src.platformer.world import World
from src.env.observations import build_observation, OBS_SIZE

# action -> (left, right, jump)
ACTIONS: Tuple[Tuple[bool, bool, bool], ...] = (
    (False, False, False),  # 0 NOOP
    (True, False, False),   # 1 LEFT
    (False, True, False),   # 2 RIGHT
    (False, False, True),   # 3 JUMP
    (True, False, True),    # 4 LEFT + JUMP
    (False, True, True),    # 5 RIGHT + JUMP
)


class RunnerEnv(gym.Env):
    """
    Endless platformer Gymnasium environment (vector observations).
    - Simulation ticks at 60 Hz, no wall clock involved.
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Observation: shape (12,), float32, see build_observation().
    - Never touches the save file.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(len(ACTIONS))

        low = np.array([0.0, -1.0, -1.0, 0.0, 0.0, 0.0, 0.0] + [0.0] * 3 + [-1.0, -1.0], dtype=np.float32)
        high = np.ones(OBS_SIZE, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        self.world: Optional[World] = None
        self.timestep: int = 0

        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)
        # Seeding policy:
        # - a provided seed goes straight to the World for strict reproducibility
        # - otherwise the World randomizes its own terrain
        world_seed = int(seed) if seed is not None else None
        self.world = World(seed=world_seed)
        self.timestep = 0

        obs = self._get_obs()
        info = {"seed": self.world.seed, "score": self.world.score, "camera_x": self.world.camera.x}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.world is not None
        world = self.world

        self._apply_action(int(action))
        score0, cam0 = world.score, world.camera.x

        for _ in range(self.frame_skip):
            world.tick()
            if not world.alive:
                break

        reward = (world.camera.x - cam0) / 100.0 + (world.score - score0) / 10.0
        if not world.alive:
            reward = -1.0

        self.timestep += 1
        terminated = not world.alive
        truncated = (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions)

        obs = self._get_obs()
        info = {
            "seed": world.seed,
            "score": world.score,
            "camera_x": world.camera.x,
            "timestep": self.timestep,
            "grounded": world.player.on_ground,
            "combo": world.combo.count,
        }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _apply_action(self, action: int):
        left, right, jump = ACTIONS[action]
        inp = self.world.input
        for keys, held in ((LEFT_KEYS, left), (RIGHT_KEYS, right), (JUMP_KEYS, jump)):
            if held:
                inp.press(keys[0])
            else:
                for k in keys:
                    inp.release(k)

    def _get_obs(self) -> np.ndarray:
        assert self.world is not None
        return build_observation(self.world)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.world is None:
            return
        # imported lazily: the front-end module pulls in display code
        from src.platformer.game import draw_world

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Endless Platformer - Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()
            self.font = pygame.font.SysFont("jetbrainsmono", 18)

        if self.render_mode == "human":
            pygame.event.pump()

        draw_world(self.screen, self.world, self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
