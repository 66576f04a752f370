"""Layout constants and color definitions."""

# Timing
FPS = 60
TPS = 30

# Layout dimensions
SCREEN_W = 900
SCREEN_H = 600
STATUS_H = 36
SIDEBAR_W = 180

# Picking
PICK_RADIUS = 10
POINT_RADIUS = 5
WALKER_SIZE = 12
CURVE_STEPS = 200

# Colors
BG_COLOR = (20, 20, 30)
CURVE_COLOR = (0, 220, 220)
HANDLE_LINE = (70, 70, 95)
SIDEBAR_BG = (25, 25, 38)
STATUS_BG = (35, 35, 50)
TEXT_COLOR = (200, 200, 210)
TEXT_DIM = (120, 120, 140)
LABEL_COLOR = (180, 180, 200)
WALKER_COLOR = (255, 160, 40)
TRIGGER_IDLE = (128, 128, 128)
TRIGGER_FIRED = (255, 255, 255)

# Anchor mode -> color
MODE_COLORS: dict[str, tuple[int, int, int]] = {
    "FREE": (220, 80, 220),
    "ALIGNED": (60, 220, 80),
    "MIRRORED": (240, 220, 60),
}
