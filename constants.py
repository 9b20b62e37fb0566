# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties, default window sizes, or numeric guards that are not part of
the arena configuration.
"""

# Visualization settings
WINDOW_WIDTH = 600
WINDOW_HEIGHT = 600
FPS = 60
BACKGROUND_COLOR = (255, 255, 255) # White
ARENA_LINE_COLOR = (0, 0, 0)
ARENA_LINE_WIDTH = 4
HUD_TEXT_COLOR = (0, 0, 0)

# Token sprites are drawn at a fixed flag size, centered on the token.
TOKEN_SPRITE_SIZE = (40, 28)

# --- Winner Popup ---
# Duration of the pop-in animation, in milliseconds.
POPUP_POP_MS = 800
# Peak scale of the popup during the pop-in before it settles at 1.0.
POPUP_OVERSHOOT_SCALE = 1.2
POPUP_BACKGROUND_COLOR = (255, 215, 0) # Gold
POPUP_TEXT_COLOR = (0, 0, 0)

# --- Physics Guards ---
# Pairs closer than this are treated as coincident; no push direction exists.
COINCIDENT_EPSILON = 1e-9
# Rejection-sampling budget for a non-overlapping starting position.
DEFAULT_PLACEMENT_ATTEMPTS = 50
# Cool-down between a winner announcement and the next round.
DEFAULT_RESET_DELAY_MS = 3000

# Fallback colors for tokens drawn without an image.
VIBRANT_COLORS = [
    (255, 0, 102),   # Hot Pink
    (0, 170, 255),   # Sky Blue
    (255, 170, 0),   # Amber
    (0, 200, 102),   # Green
    (153, 0, 255),   # Purple
    (255, 102, 0)    # Orange
]

# The contestants used when the config file does not list any.
DEFAULT_CONTESTANTS = [
    "canada", "germany", "japan", "usa", "france",
    "italy", "uk", "brazil", "argentina", "spain",
    "portugal", "mexico", "china", "india", "australia",
    "southafrica", "egypt", "nigeria", "turkey", "sweden"
]
