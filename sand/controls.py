"""Input collection: pygame events → grid-aligned spawn points and quit requests."""
from typing import Iterable, List, Tuple
import os

import sand as P
from sand.engine import round_to_grid

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame


def spawn_points(events: Iterable, cell: int = P.CELL_SIZE) -> List[Tuple[int, int]]:
    """Mouse release anywhere, or motion with the left button held, pours one particle."""
    points = []
    for event in events:
        if event.type == pygame.MOUSEBUTTONUP:
            x, y = event.pos
        elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
            x, y = event.pos
        else:
            continue
        points.append((round_to_grid(x, cell), round_to_grid(y, cell)))
    return points


def quit_requested(events: Iterable) -> bool:
    for event in events:
        if event.type == pygame.QUIT:
            return True
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return True
    return False
