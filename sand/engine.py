"""
Sand settling engine — grid particles falling and piling up.

- Particles sit on a fixed CELL_SIZE grid, y grows downward (origin top-left)
- A free particle falls one cell per tick until something static is below it
- A blocked particle shifts one cell sideways, or freezes when boxed in
- State per particle: (x, y, is_static)
"""

import numpy as np
from dataclasses import dataclass, field, replace
from typing import List, Tuple, Optional, Dict, Sequence

import sand as P
import copy


NONE = 0
RIGHT = 1
LEFT = -1

_DIRECTION_NAMES = {NONE: 'none', RIGHT: 'right', LEFT: 'left'}


@dataclass
class Particle:
    """One grid cell of sand. Compares by position only."""
    x: int
    y: int
    is_static: bool = field(default=False, compare=False)

    def as_static(self) -> 'Particle':
        return replace(self, is_static=True)

    def side_neighbors(self, particles: Sequence['Particle'],
                       cell: int = P.CELL_SIZE) -> Tuple[bool, bool]:
        """(has_left, has_right) among static particles on the same row."""
        has_left = any(o.is_static and o.x == self.x - cell and o.y == self.y
                       for o in particles)
        has_right = any(o.is_static and o.x == self.x + cell and o.y == self.y
                        for o in particles)
        return has_left, has_right


@dataclass(frozen=True)
class Alignment:
    """Sideways shift for a blocked particle. anchor_y names the deciding obstacle."""
    direction: int = NONE
    anchor_y: Optional[int] = None

    @property
    def name(self) -> str:
        return _DIRECTION_NAMES[self.direction]


def round_to_grid(n: int, cell: int = P.CELL_SIZE) -> int:
    """Snap up to the next grid line. Already aligned input still moves a full cell."""
    return n + (cell - n % cell)


# Predicates

def lands_on_static(p: Particle, particles: Sequence[Particle],
                    cell: int = P.CELL_SIZE) -> bool:
    next_y = p.y + cell
    return any(o.is_static and o.x == p.x and o.y == next_y for o in particles)


def find_obstacles(index: int, particles: Sequence[Particle],
                   cell: int = P.CELL_SIZE,
                   depth: int = P.OBSTACLE_DEPTH) -> List[Particle]:
    """Static particles in the same column down to `depth` below the landing row, top first.

    The particle itself is skipped by index so a duplicate at the same
    position still counts.
    """
    p = particles[index]
    limit = p.y + cell + depth
    obstacles = [o for j, o in enumerate(particles)
                 if j != index and o.is_static and o.x == p.x and o.y <= limit]
    obstacles.sort(key=lambda o: o.y)
    return obstacles


def choose_alignment(obstacles: Sequence[Particle],
                     neighbors: Sequence[Tuple[bool, bool]],
                     rng=None) -> Tuple[Alignment, bool]:
    """
    First one-sided obstacle decides: a left neighbour pushes right and vice versa.
    With no decisive obstacle, flip a coin anchored at the last one scanned.

    Returns (alignment, was_random).
    """
    last = None
    for obstacle, (has_left, has_right) in zip(obstacles, neighbors):
        last = obstacle
        if has_left and not has_right:
            return Alignment(RIGHT, obstacle.y), False
        if has_right and not has_left:
            return Alignment(LEFT, obstacle.y), False

    if last is None:
        return Alignment(), False

    if rng is None:
        rng = np.random
    direction = RIGHT if rng.randint(0, 2) == 1 else LEFT
    return Alignment(direction, last.y), True


def displace(p: Particle, alignment: Alignment,
             cell: int = P.CELL_SIZE) -> Particle:
    if alignment.direction == RIGHT:
        return Particle(p.x + cell, p.y)
    return Particle(p.x - cell, p.y)


def transition(particles: Sequence[Particle],
               board_height: int = P.BOARD_HEIGHT,
               rng=None,
               log: Optional[List[Dict]] = None,
               cell: int = P.CELL_SIZE) -> List[Particle]:
    """
    Advance every particle one tick. Output[i] continues input[i].

    All decisions read the input snapshot, never the partial output.
    `rng` needs numpy's randint(low, high); it is only consulted for the
    coin-flip fallback. Displacement and freeze decisions are appended to
    `log` when given.
    """
    result = []
    for i, p in enumerate(particles):
        if p.is_static or p.y + cell == board_height:
            result.append(p.as_static())
            continue

        if not lands_on_static(p, particles, cell):
            result.append(Particle(p.x, p.y + cell))
            continue

        obstacles = find_obstacles(i, particles, cell)
        neighbors = [o.side_neighbors(particles, cell) for o in obstacles]

        # Boxed in somewhere in the band: nowhere to slide.
        if any(has_left and has_right for has_left, has_right in neighbors):
            result.append(p.as_static())
            if log is not None:
                log.append({
                    'index': i, 'x': p.x, 'y': p.y, 'direction': 'blocked',
                    'anchor_y': None, 'random': False,
                })
            continue

        alignment, was_random = choose_alignment(obstacles, neighbors, rng)
        result.append(displace(p, alignment, cell))
        if log is not None:
            log.append({
                'index': i, 'x': p.x, 'y': p.y, 'direction': alignment.name,
                'anchor_y': alignment.anchor_y, 'random': was_random,
            })
    return result


@dataclass
class WorldConfig:
    width: int = P.BOARD_WIDTH
    height: int = P.BOARD_HEIGHT
    cell_size: int = P.CELL_SIZE
    seed: Optional[int] = P.SEED


class SandWorld:
    """
    Holds the particle list between ticks and feeds it through `transition`.

    Step: snapshot → transition → replace
    """

    def __init__(self, config: WorldConfig):
        if config.width % config.cell_size or config.height % config.cell_size:
            raise ValueError(
                f"Board {config.width}x{config.height} is not a multiple of "
                f"cell size {config.cell_size}")
        self.config = config
        self.rng = np.random.RandomState(config.seed)
        self.particles: List[Particle] = []
        self.tick: int = 0
        self.displacement_log: List[Dict] = []

    def initialize(self, particles: Optional[List[Particle]] = None) -> List[Particle]:
        self.particles = [copy.deepcopy(p) for p in particles] if particles else []
        self.tick = 0
        self.displacement_log = []
        return self.particles

    def spawn(self, x: int, y: int) -> Optional[Particle]:
        """Add a particle at grid-aligned (x, y). Points off the board are dropped."""
        cell = self.config.cell_size
        if x % cell or y % cell:
            raise ValueError(f"Spawn point ({x}, {y}) is not aligned to cell size {cell}")
        if not (0 <= x < self.config.width and 0 <= y < self.config.height):
            return None
        particle = Particle(x, y)
        self.particles.append(particle)
        return particle

    def step(self) -> List[Particle]:
        decisions: List[Dict] = []
        self.particles = transition(self.particles, self.config.height,
                                    rng=self.rng, log=decisions,
                                    cell=self.config.cell_size)
        for entry in decisions:
            entry['tick'] = self.tick
        self.displacement_log.extend(decisions)
        self.tick += 1
        return self.particles

    # State access

    def get_state(self) -> np.ndarray:
        """(n_particles, 3) → [x, y, is_static]"""
        return np.array([[p.x, p.y, int(p.is_static)] for p in self.particles],
                        dtype=int).reshape(-1, 3)

    def set_state(self, state: np.ndarray):
        assert state.ndim == 2 and state.shape[1] == 3
        self.particles = particles_from_state(state)

    def static_count(self) -> int:
        return sum(1 for p in self.particles if p.is_static)

    def is_settled(self) -> bool:
        return all(p.is_static for p in self.particles)


def particles_from_state(state: np.ndarray) -> List[Particle]:
    return [Particle(int(x), int(y), bool(s)) for x, y, s in state]


def generate_trajectory(config: WorldConfig,
                        spawns: Optional[Dict[int, List[Tuple[int, int]]]] = None,
                        n_steps: int = P.N_STEPS) -> Dict:
    """
    Scripted headless run. `spawns` maps tick → screen points poured before that tick.

    Returns dict with states, config, displacements, static_counts.
    """
    spawns = spawns or {}
    world = SandWorld(config)
    world.initialize()

    states = [world.get_state()]
    static_counts = [world.static_count()]

    for t in range(n_steps):
        for x, y in spawns.get(t, []):
            world.spawn(round_to_grid(x, config.cell_size),
                        round_to_grid(y, config.cell_size))
        world.step()
        states.append(world.get_state())
        static_counts.append(world.static_count())

    return {
        'states': states,
        'config': config,
        'displacements': world.displacement_log,
        'static_counts': np.array(static_counts),
    }
