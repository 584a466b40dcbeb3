"""
Headless pour — two streams of sand, written out as PNG frames.
Run: venv/bin/python record.py
"""
import numpy as np

import sand as P
from sand.engine import generate_trajectory, WorldConfig
from sand.renderer import Renderer, AppearanceConfig, save_frames

OUT_DIR = 'results/frames'
STREAMS = [(P.BOARD_WIDTH // 2, 0), (P.BOARD_WIDTH // 2 + 80, 0)]
POUR_TICKS = 120


def record(n_steps: int = P.N_STEPS, seed: int = 0):
    config = WorldConfig(seed=seed)
    spawns = {t: STREAMS for t in range(POUR_TICKS)}

    print(f"Pouring {len(STREAMS)} streams for {POUR_TICKS} ticks, {n_steps} ticks total")
    traj = generate_trajectory(config, spawns=spawns, n_steps=n_steps)

    final = traj['states'][-1]
    decisions = traj['displacements']
    n_random = sum(1 for d in decisions if d['random'])
    n_blocked = sum(1 for d in decisions if d['direction'] == 'blocked')

    print(f"Particles: {len(final)} ({int(traj['static_counts'][-1])} settled)")
    print(f"Sideways moves: {len(decisions) - n_blocked} ({n_random} coin flips)")
    print(f"Boxed-in freezes: {n_blocked}")
    if len(final):
        print(f"Pile top: y={int(np.min(final[:, 1]))}")

    renderer = Renderer(config.width, config.height, AppearanceConfig())
    n_frames = save_frames(renderer.render_trajectory(traj), OUT_DIR)
    print(f"Frames saved to {OUT_DIR}/ ({n_frames})")


if __name__ == "__main__":
    record()
