import numpy as np
from typing import Iterable, Iterator, List, Tuple, Optional, Dict
from dataclasses import dataclass
import os

import sand as P
from sand.controls import spawn_points, quit_requested
from sand.engine import Particle, SandWorld, particles_from_state

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame


@dataclass
class AppearanceConfig:
    fg_color: Tuple[int,int,int] = P.FG_COLOR
    bg_color: Tuple[int,int,int] = P.BG_COLOR
    cell_size: int = P.CELL_SIZE
    title: str = P.WINDOW_TITLE


class Renderer:
    """Maps particle sets → pixel frames, and drives the interactive window."""

    def __init__(self, width: int, height: int,
                 config: Optional[AppearanceConfig] = None):
        self.width = width
        self.height = height
        self.config = config or AppearanceConfig()
        self._display_initialized = False

    def draw(self, surface: pygame.Surface, particles: List[Particle]):
        cell = self.config.cell_size
        surface.fill(self.config.bg_color)
        for p in particles:
            surface.fill(self.config.fg_color, pygame.Rect(p.x, p.y, cell, cell))

    def render(self, particles: List[Particle]) -> np.ndarray:
        """Render single frame → (height, width, 3) uint8."""
        surface = pygame.Surface((self.width, self.height))
        self.draw(surface, particles)
        return pygame.surfarray.array3d(surface).transpose(1, 0, 2)

    def render_trajectory(self, trajectory: Dict) -> Iterator[np.ndarray]:
        """Yield one frame per recorded state; full boards are too large to stack."""
        for state in trajectory['states']:
            yield self.render(particles_from_state(state))

    def play(self, world: SandWorld, fps: int = P.FPS):
        """Run the sandbox until the window closes or Esc is pressed."""
        if not self._display_initialized:
            pygame.init()
            self._display_initialized = True

        screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption(self.config.title)
        clock = pygame.time.Clock()

        while True:
            events = pygame.event.get()
            if quit_requested(events):
                break
            for x, y in spawn_points(events, self.config.cell_size):
                world.spawn(x, y)

            self.draw(screen, world.particles)
            world.step()
            pygame.display.flip()
            clock.tick(fps)

        pygame.quit()
        self._display_initialized = False


def save_frames(frames: Iterable[np.ndarray], path: str) -> int:
    """Save frames as individual PNGs. Returns the number written."""
    os.makedirs(path, exist_ok=True)
    count = 0
    for t, frame in enumerate(frames):
        surf = pygame.surfarray.make_surface(frame.transpose(1, 0, 2))
        pygame.image.save(surf, os.path.join(path, f'frame_{t:05d}.png'))
        count += 1
    return count
