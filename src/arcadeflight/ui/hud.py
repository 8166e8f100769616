"""Heads-up display panels.

Panel content is built from an InstrumentSnapshot by plain functions so it
can be checked without a display; HudRenderer only draws the prepared lines
with pygame fonts.

Panels:
- Primary: speed, altitude, vertical speed, g-force
- Heading
- Weather: condition, wind, outside temperature
- Engine: status, throttle, fuel, engine temperature
- Configuration: landing gear, flaps
- Controls help and camera mode
"""

from dataclasses import dataclass

import pygame  # pylint: disable=no-member

from arcadeflight.core.camera import CameraMode
from arcadeflight.core.logging_system import get_logger
from arcadeflight.physics.flight_model.base import EngineStatus, InstrumentSnapshot

logger = get_logger(__name__)

Color = tuple[int, int, int]

AMBER: Color = (251, 191, 36)
GREEN: Color = (74, 222, 128)
RED: Color = (248, 113, 113)
PANEL_BACKGROUND = (15, 23, 42, 200)

LOW_FUEL_PERCENT = 20.0
HIGH_ENGINE_TEMP_C = 110
HIGH_G_FORCE = 2.0


@dataclass(frozen=True)
class HudLine:
    """One label/value row of a panel."""

    label: str
    value: str
    color: Color = AMBER


def format_vertical_speed(vertical_speed: int) -> str:
    """Signed vertical speed ("+120", "-80", "0")."""
    return f"+{vertical_speed}" if vertical_speed > 0 else str(vertical_speed)


def vertical_speed_color(vertical_speed: int) -> Color:
    if vertical_speed > 0:
        return GREEN
    if vertical_speed < 0:
        return RED
    return AMBER


def engine_status_color(status: EngineStatus) -> Color:
    if status is EngineStatus.FUEL_OUT:
        return RED
    if status is EngineStatus.RUNNING:
        return GREEN
    return AMBER


def build_panels(
    instruments: InstrumentSnapshot,
    camera_mode: CameraMode,
    playing: bool,
) -> dict[str, list[HudLine]]:
    """Build every HUD panel.

    Args:
        instruments: Current instrument snapshot.
        camera_mode: Current camera mode (shown in the controls panel).
        playing: Whether the simulation is running.

    Returns:
        Panel name -> rows, in drawing order.
    """
    i = instruments
    weather = i.weather
    return {
        "primary": [
            HudLine("SPEED", f"{i.speed} KTS"),
            HudLine("ALT", f"{i.altitude} FT"),
            HudLine("V/S", f"{format_vertical_speed(i.vertical_speed)} FPM",
                    vertical_speed_color(i.vertical_speed)),
            HudLine("G-FORCE", f"{i.g_force:.1f}G", RED if i.g_force > HIGH_G_FORCE else AMBER),
        ],
        "heading": [
            HudLine("HEADING", f"{i.heading:03d}°"),
        ],
        "weather": [
            HudLine("WEATHER", weather.condition),
            HudLine("WIND", f"{weather.wind_speed_kts} KT"),
            HudLine("TEMP", f"{weather.temperature_c}°C"),
        ],
        "engine": [
            HudLine("ENGINE", i.engine_status.value, engine_status_color(i.engine_status)),
            HudLine("THROTTLE", f"{i.throttle}%"),
            HudLine("FUEL", f"{i.fuel:.1f}%", RED if i.fuel < LOW_FUEL_PERCENT else AMBER),
            HudLine("ENG TEMP", f"{i.engine_temp}°C",
                    RED if i.engine_temp > HIGH_ENGINE_TEMP_C else AMBER),
        ],
        "configuration": [
            HudLine("GEAR", "DOWN" if i.landing_gear else "UP", GREEN if i.landing_gear else RED),
            HudLine("FLAPS", f"{i.flaps}°", GREEN if i.flaps > 0 else AMBER),
        ],
        "controls": [
            HudLine("W/S, Up/Down", "Pitch"),
            HudLine("A/D, Left/Right", "Roll"),
            HudLine("Shift / Ctrl", "Throttle"),
            HudLine("F / G", "Flaps"),
            HudLine("Space", "Pause" if playing else "Start"),
            HudLine("C", f"Camera: {camera_mode.value.upper()}"),
            HudLine("L", "Gear"),
        ],
    }


class HudRenderer:
    """Draws HUD panels onto a pygame surface."""

    PADDING = 8
    LINE_SPACING = 4

    def __init__(self, font_size: int = 16) -> None:
        """Initialize fonts (pygame.font must be initialized)."""
        self.font = pygame.font.SysFont("monospace", font_size, bold=True)
        self.large_font = pygame.font.SysFont("monospace", font_size * 2, bold=True)

    def draw(
        self,
        surface: pygame.Surface,
        instruments: InstrumentSnapshot,
        camera_mode: CameraMode,
        playing: bool,
    ) -> None:
        """Draw all panels.

        Args:
            surface: Target surface.
            instruments: Current instrument snapshot.
            camera_mode: Current camera mode.
            playing: Whether the simulation is running.
        """
        panels = build_panels(instruments, camera_mode, playing)
        width, height = surface.get_size()

        self._draw_panel(surface, panels["primary"], (10, 10))
        self._draw_panel(surface, panels["heading"], (width // 2 - 60, 10))
        self._draw_panel(surface, panels["weather"], (width - 190, 10))
        self._draw_panel(surface, panels["engine"], (10, height - 130), anchor_bottom=True)
        self._draw_panel(surface, panels["configuration"], (width - 190, height - 80),
                         anchor_bottom=True)
        self._draw_panel(surface, panels["controls"], (width - 260, 120))

        if not playing:
            text = self.large_font.render("PAUSED", True, AMBER)
            surface.blit(text, text.get_rect(center=(width // 2, height // 2)))

    def _draw_panel(
        self,
        surface: pygame.Surface,
        lines: list[HudLine],
        position: tuple[int, int],
        anchor_bottom: bool = False,
    ) -> None:
        rendered = [
            (
                self.font.render(f"{line.label}: ", True, AMBER),
                self.font.render(line.value, True, line.color),
            )
            for line in lines
        ]
        line_height = self.font.get_linesize() + self.LINE_SPACING
        panel_width = max(label.get_width() + value.get_width() for label, value in rendered)
        panel_height = line_height * len(rendered)

        x, y = position
        if anchor_bottom:
            y = min(y, surface.get_height() - panel_height - 2 * self.PADDING - 10)

        background = pygame.Surface(
            (panel_width + 2 * self.PADDING, panel_height + 2 * self.PADDING), pygame.SRCALPHA
        )
        background.fill(PANEL_BACKGROUND)
        surface.blit(background, (x, y))

        for row, (label, value) in enumerate(rendered):
            row_y = y + self.PADDING + row * line_height
            surface.blit(label, (x + self.PADDING, row_y))
            surface.blit(value, (x + self.PADDING + label.get_width(), row_y))
