# visualization.py
"""
Handles the presentation of the arena contest using Pygame.
"""
import logging
import math
import os
import pygame
from typing import Dict, Optional, Tuple

from arena import Arena
from constants import (
    WINDOW_WIDTH, WINDOW_HEIGHT, FPS, BACKGROUND_COLOR, ARENA_LINE_COLOR,
    ARENA_LINE_WIDTH, HUD_TEXT_COLOR, TOKEN_SPRITE_SIZE, POPUP_POP_MS,
    POPUP_OVERSHOOT_SCALE, POPUP_BACKGROUND_COLOR, POPUP_TEXT_COLOR,
    VIBRANT_COLORS
)

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import RoundController


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, arena: Arena, image_dir: Optional[str] = None, colors: Optional[list] = None):
#     - Inputs:
#       - arena: the Arena being drawn.
#       - image_dir: directory holding "<identifier>.png" token images.
#       - colors: Optional list of RGB lists used for tokens without an image.
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - draw(self, controller: "RoundController") -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders the arena, tokens, HUD and winner popup, handles
#       Pygame events. Pressing R restarts the round through the controller.
#
#   - wait_frame(self) -> float:
#     - Outputs: milliseconds elapsed since the previous frame, capped at FPS.


class Visualizer:
    """
    Renders the arena, the active tokens and the winner announcement.
    """
    def __init__(self, arena: Arena, image_dir: Optional[str] = None, colors: Optional[list] = None):
        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("Last Flag Standing")
        self.clock = pygame.time.Clock()

        self.arena = arena
        self.image_dir = image_dir
        self.colors = self._initialize_colors(colors)
        self.sprites: Dict[str, Optional[pygame.Surface]] = {}

        self.font_hud = pygame.font.SysFont("Arial", 14)
        self.font_label = pygame.font.SysFont("Arial", 12, bold=True)
        self.font_popup = pygame.font.SysFont("Arial", 36, bold=True)

        logging.info(f"Visualizer initialized with Pygame display ({WINDOW_WIDTH}x{WINDOW_HEIGHT}).")

    def _initialize_colors(self, config_colors: Optional[list]) -> list:
        """Parses token colors from config, falling back to the vibrant palette."""
        if not config_colors:
            return [pygame.Color(c) for c in VIBRANT_COLORS]
        try:
            return [pygame.Color(rgb) for rgb in config_colors]
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse token colors from config: {e}. Using vibrant default palette.")
            return [pygame.Color(c) for c in VIBRANT_COLORS]

    def _sprite_for(self, name: str) -> Optional[pygame.Surface]:
        """
        Loads and caches the image for a token, or None if there is no image.
        """
        if name in self.sprites:
            return self.sprites[name]

        sprite = None
        if self.image_dir:
            path = os.path.join(self.image_dir, f"{name}.png")
            try:
                image = pygame.image.load(path).convert_alpha()
                sprite = pygame.transform.smoothscale(image, TOKEN_SPRITE_SIZE)
            except (pygame.error, FileNotFoundError) as e:
                logging.debug(f"No image for token '{name}' ({e}); drawing a disc instead.")
        self.sprites[name] = sprite
        return sprite

    def _color_for(self, name: str) -> pygame.Color:
        return self.colors[sum(map(ord, name)) % len(self.colors)]

    def _draw_arena(self):
        """Draws the wall as an arc that leaves the gap open."""
        arena = self.arena
        cx, cy = arena.center
        rect = pygame.Rect(0, 0, arena.radius * 2, arena.radius * 2)
        rect.center = (int(cx), int(cy))
        # Pygame measures arc angles counterclockwise with y pointing up, while
        # arena angles are measured on screen with y pointing down.
        start = -(arena.gap_start + 2 * math.pi)
        stop = -arena.gap_end
        pygame.draw.arc(self.screen, ARENA_LINE_COLOR, rect, start, stop, ARENA_LINE_WIDTH)

    def _draw_tokens(self, controller: "RoundController"):
        radius = int(self.arena.token_radius)
        for token in controller.get_active_tokens():
            pos = (int(token["x"]), int(token["y"]))
            sprite = self._sprite_for(token["id"])
            if sprite is not None:
                self.screen.blit(sprite, sprite.get_rect(center=pos))
                continue

            pygame.draw.circle(self.screen, self._color_for(token["id"]), pos, radius)
            label = self.font_label.render(token["id"][:3].upper(), True, (255, 255, 255))
            self.screen.blit(label, label.get_rect(center=pos))

    def _draw_hud(self, controller: "RoundController"):
        text = f"Remaining: {controller.get_remaining_count()}   Round: {controller.round_number}"
        surf = self.font_hud.render(text, True, HUD_TEXT_COLOR)
        self.screen.blit(surf, (10, 10))

    def _popup_scale(self, shown_ms: float) -> float:
        """Pop-in: grow to the overshoot scale, then settle back to 1.0."""
        if shown_ms >= POPUP_POP_MS:
            return 1.0
        half = POPUP_POP_MS / 2.0
        if shown_ms < half:
            return POPUP_OVERSHOOT_SCALE * (shown_ms / half)
        return POPUP_OVERSHOOT_SCALE - (POPUP_OVERSHOOT_SCALE - 1.0) * ((shown_ms - half) / half)

    def _draw_winner_popup(self, controller: "RoundController"):
        if controller.winner is None:
            return
        remaining = controller.presentation_remaining_ms()
        if remaining <= 0:
            return

        shown_ms = controller.reset_delay_ms - remaining
        scale = self._popup_scale(shown_ms)
        if scale <= 0.05:
            return

        text = self.font_popup.render(f"Winner: {controller.winner.upper()}!", True, POPUP_TEXT_COLOR)
        box = pygame.Surface((text.get_width() + 40, text.get_height() + 24), pygame.SRCALPHA)
        pygame.draw.rect(box, POPUP_BACKGROUND_COLOR, box.get_rect(), border_radius=12)
        box.blit(text, text.get_rect(center=box.get_rect().center))

        size: Tuple[int, int] = (max(int(box.get_width() * scale), 1), max(int(box.get_height() * scale), 1))
        box = pygame.transform.smoothscale(box, size)
        self.screen.blit(box, box.get_rect(center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2)))

    def draw(self, controller: "RoundController") -> bool:
        """
        Draws the current frame and handles events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                if event.key == pygame.K_r:
                    logging.info("Round restarted by user.")
                    controller.reset()

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_arena()
        self._draw_tokens(controller)
        self._draw_hud(controller)
        self._draw_winner_popup(controller)

        pygame.display.flip()
        return True

    def wait_frame(self) -> float:
        """Blocks until the next frame is due and returns the elapsed ms."""
        return float(self.clock.tick(FPS))

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
