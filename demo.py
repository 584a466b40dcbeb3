"""
Sandbox — pour sand with the mouse and watch it pile up.
Run: venv/bin/python demo.py
Click or drag with the left button to pour. Press Esc or close window to exit.
"""
from sand.engine import SandWorld, WorldConfig
from sand.renderer import Renderer, AppearanceConfig
import sand as P

# World and window use centralized defaults
config = WorldConfig(seed=P.SEED)
world = SandWorld(config)

renderer = Renderer(config.width, config.height, AppearanceConfig())
renderer.play(world, fps=P.FPS)

print(f"Ticks: {world.tick}")
print(f"Particles: {len(world.particles)} ({world.static_count()} settled)")
print(f"Sideways moves: {len(world.displacement_log)}")
