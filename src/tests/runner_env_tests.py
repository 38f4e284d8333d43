# src/tests/runner_env_tests.py
"""
Quick tests for RunnerEnv (Gymnasium environment).

Usage (from repo root):
  pytest src/tests/runner_env_tests.py
  python -m src.tests.runner_env_tests
  python -m src.tests.runner_env_tests --no-api-check --no-determinism
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Tuple

import numpy as np
from gymnasium.utils.env_checker import check_env

from src.env.runner_env import RunnerEnv


def api_check(frame_skip: int = 4) -> None:
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = RunnerEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()
    print("✓ API check ok")


def smoke_test(steps: int = 300, seed: int = 123, frame_skip: int = 4) -> None:
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = RunnerEnv(frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        assert env.observation_space.contains(obs), "Initial observation not in space"
        env.action_space.seed(seed)

        for t in range(steps):
            a = env.action_space.sample()
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term:
                assert r == -1.0, "death is punished"
            if term or trunc:
                break
    finally:
        env.close()
    print("✓ Smoke test ok")


def determinism_test(steps: int = 300, seed: int = 123, frame_skip: int = 4) -> None:
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = RunnerEnv(frame_skip=frame_skip)
        traj: List[Tuple[np.ndarray, float, bool, bool]] = []
        try:
            obs, _ = env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 6)) for _ in range(steps)]

    t1 = rollout(seed, action_seq)
    t2 = rollout(seed, action_seq)

    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        if not np.allclose(o1, o2):
            raise AssertionError(f"Determinism: obs mismatch at step {i}")
        if not (r1 == r2 and te1 == te2 and tr1 == tr2):
            raise AssertionError(f"Determinism: transition mismatch at step {i}")

    print("✓ Determinism ok")


def test_api():
    api_check()


def test_smoke():
    smoke_test()


def test_determinism():
    determinism_test()


def test_time_limit_truncates():
    env = RunnerEnv(frame_skip=4, time_limit_seconds=0.5)
    try:
        env.reset(seed=1)
        done = False
        steps = 0
        while not done:
            _, _, term, trunc, _ = env.step(0)
            steps += 1
            done = term or trunc
        assert trunc and not term, "standing still on the start platform only truncates"
        assert steps == env.time_limit_decisions
    finally:
        env.close()


def test_running_right_earns_progress():
    env = RunnerEnv(frame_skip=4)
    try:
        env.reset(seed=2)
        total = 0.0
        for _ in range(20):
            _, r, term, _, info = env.step(2)
            total += r
            if term:
                break
        assert info["camera_x"] > 0.0
        assert total > 0.0 or term
    finally:
        env.close()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=123, help="Episode seed for tests")
    ap.add_argument("--steps", type=int, default=300, help="Max decision steps per test")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim ticks per decision step")
    ap.add_argument("--no-api-check", action="store_true", help="Skip Gym API compliance check")
    ap.add_argument("--no-smoke", action="store_true", help="Skip smoke test")
    ap.add_argument("--no-determinism", action="store_true", help="Skip determinism test")
    args = ap.parse_args()

    try:
        if not args.no_api_check:
            api_check(frame_skip=args.frame_skip)
        if not args.no_smoke:
            smoke_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
        if not args.no_determinism:
            determinism_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    else:
        print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
