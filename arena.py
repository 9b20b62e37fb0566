# arena.py
"""
Immutable geometric configuration of the arena.

The Arena is built once from the "arena" section of config.json and shared,
read-only, by every component for the lifetime of the process.
"""
import logging
import math
from typing import Any, Dict, NamedTuple, Tuple

# --- Data Contracts ---
#
# class Arena(NamedTuple):
#   - Fields:
#     - center: Tuple[float, float], arena center in screen coordinates.
#     - radius: float, radius of the solid wall.
#     - token_radius: float, collision radius of every token.
#     - gap_center: float, angle of the exit gap's midpoint (radians).
#     - gap_width: float, angular width of the exit gap (radians).
#     - speed: float, per-tick speed assigned to new tokens.
#     - placement_margin: float, extra clearance from the wall at placement.
#   - Invariants (checked by from_config / validate):
#     - 0 < token_radius < radius
#     - 0 < gap_width < 2*pi
#     - speed >= 0, placement_margin >= 0


def _degrees_param(params: Dict[str, Any], key: str, default_radians: float) -> float:
    if key in params:
        return math.radians(float(params[key]))
    return default_radians


class Arena(NamedTuple):
    center: Tuple[float, float] = (300.0, 300.0)
    radius: float = 220.0
    token_radius: float = 18.0
    gap_center: float = math.pi / 2
    gap_width: float = math.pi / 4
    speed: float = 4.5
    placement_margin: float = 5.0

    @property
    def exit_radius(self) -> float:
        """Distance a token must clear, inside the gap, to be eliminated."""
        return self.radius + self.token_radius

    @property
    def placement_radius(self) -> float:
        """Radius of the disk that initial positions are drawn from."""
        return self.radius - self.token_radius - self.placement_margin

    @property
    def gap_start(self) -> float:
        return self.gap_center - self.gap_width / 2.0

    @property
    def gap_end(self) -> float:
        return self.gap_center + self.gap_width / 2.0

    def validate(self) -> "Arena":
        """
        Enforces the geometric invariants. Raises ValueError on violation.
        """
        problems = []
        if not 0 < self.token_radius < self.radius:
            problems.append(
                f"token_radius ({self.token_radius}) must be positive and "
                f"smaller than radius ({self.radius})"
            )
        if not 0 < self.gap_width < 2 * math.pi:
            problems.append(
                f"gap width ({math.degrees(self.gap_width):.1f} deg) must lie "
                f"strictly between 0 and 360 degrees"
            )
        if self.speed < 0:
            problems.append(f"speed ({self.speed}) must not be negative")
        if self.placement_margin < 0:
            problems.append(f"placement_margin ({self.placement_margin}) must not be negative")

        if problems:
            msg = "Configuration error in arena: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)
        return self

    @classmethod
    def from_config(cls, params: Dict[str, Any]) -> "Arena":
        """
        Builds an Arena from the "arena" config section.

        Angles are given in degrees in the config file and stored in radians.
        Missing keys fall back to the defaults above.
        """
        defaults = cls()
        center = params.get('center', defaults.center)
        arena = cls(
            center=(float(center[0]), float(center[1])),
            radius=float(params.get('radius', defaults.radius)),
            token_radius=float(params.get('token_radius', defaults.token_radius)),
            gap_center=_degrees_param(params, 'gap_center_deg', defaults.gap_center),
            gap_width=_degrees_param(params, 'gap_width_deg', defaults.gap_width),
            speed=float(params.get('speed', defaults.speed)),
            placement_margin=float(params.get('placement_margin', defaults.placement_margin)),
        )
        arena.validate()
        logging.info(
            f"Arena configured: radius {arena.radius:.1f} at {arena.center}, "
            f"token radius {arena.token_radius:.1f}, "
            f"gap {math.degrees(arena.gap_width):.1f} deg centered at "
            f"{math.degrees(arena.gap_center):.1f} deg."
        )
        return arena
