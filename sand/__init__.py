# ── Central defaults (tune here, not scattered across files) ──

# Board
CELL_SIZE = 10
BOARD_WIDTH = 1280
BOARD_HEIGHT = 720

# Settling
OBSTACLE_DEPTH = 20  # how far below the landing row obstacles are considered

# Rendering
FG_COLOR = (0, 0, 0)
BG_COLOR = (255, 255, 255)
WINDOW_TITLE = 'Pixel cascade'

# Frame loop
TICK_MS = 20
FPS = 1000 // TICK_MS

# Recording
N_STEPS = 200
SEED = None
