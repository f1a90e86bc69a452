"""Pygame front end for Project Abyss.

Renders the seabed around the pointer through a flashlight mask, feeds
mouse and keyboard input to the GameSession, and draws the HUD.  The
world layer is redrawn every frame while the run is in progress; once
the run ends the last frame is kept under the end-of-run card.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pygame

from abyss.ui.frame import (
    PALETTES,
    PANIC_STOPS,
    IconKind,
    cell_colour,
    end_card_lines,
    glitch_line,
    hull_fraction,
    icon_for,
    radial_sprite,
    scan_lines,
    shake_offset,
    status_lines,
    visible_window,
)

if TYPE_CHECKING:
    from abyss.game.session import GameSession

logger = logging.getLogger(__name__)

_ICON_SIZE = 24
_CURSOR_SIZE = 40
_PANEL_BG = (0, 20, 10, 204)
_PANEL_BORDER = (0, 77, 51)
_WHITE = (255, 255, 255)
_BADGE = {"ONLINE": (74, 222, 128), "OFFLINE": (202, 138, 4)}
_WARNING = (239, 68, 68)

# Fallback shapes when no image is configured for an icon kind
_SHAPE_COLOURS: dict[IconKind, tuple[int, int, int]] = {
    IconKind.HAZARD: (230, 60, 50),
    IconKind.POI: (240, 220, 80),
    IconKind.LIFE: (0, 255, 157),
    IconKind.RESOURCE: (170, 170, 190),
    IconKind.CORAL: (255, 120, 150),
}


def _alpha_surface(alpha: np.ndarray, colour: tuple[int, int, int]) -> pygame.Surface:
    """Solid-colour surface whose per-pixel alpha is ``alpha`` (0.0-1.0)."""
    w, h = alpha.shape
    surface = pygame.Surface((w, h), pygame.SRCALPHA)
    surface.fill((*colour, 0))
    pixels = pygame.surfarray.pixels_alpha(surface)
    pixels[:] = (np.clip(alpha, 0.0, 1.0) * 255).astype(np.uint8)
    del pixels  # unlock the surface
    return surface


def _additive_surface(intensity: np.ndarray) -> pygame.Surface:
    """Opaque red surface for additive blending (black adds nothing)."""
    w, h = intensity.shape
    surface = pygame.Surface((w, h))
    surface.fill((0, 0, 0))
    pixels = pygame.surfarray.pixels3d(surface)
    pixels[..., 0] = (np.clip(intensity, 0.0, 1.0) * 255).astype(np.uint8)
    del pixels
    return surface


class PygameRenderer:
    """Draws a GameSession into a Pygame window and forwards input.

    Attributes:
        session: The session to render and control.
        fps: Target frames per second.
        screen: The Pygame display surface.
        show_debug: Draw ``row,col`` labels on visible cells.
    """

    def __init__(self, session: GameSession, fps: int = 60) -> None:
        """Open the window and prepare cached surfaces.

        Args:
            session: The game session to render.
            fps: Target frames per second.
        """
        self.session = session
        self.fps = fps
        config = session.config
        self.palette = PALETTES[config.variant]
        self.show_debug = config.show_debug_coords

        pygame.init()
        self.screen = pygame.display.set_mode(config.viewport, pygame.RESIZABLE)
        pygame.display.set_caption("Project Abyss")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.small_font = pygame.font.SysFont("monospace", 9)
        self.banner_font = pygame.font.SysFont("monospace", 36, bold=True)
        self.running = True

        self._world = pygame.Surface(config.viewport, pygame.SRCALPHA)
        self._mask = pygame.Surface(config.viewport, pygame.SRCALPHA)
        self._world_drawn = False
        self._labels: dict[tuple[int, int], pygame.Surface] = {}

        radius = config.flashlight_radius
        self._flashlight = _alpha_surface(
            radial_sprite(radius, self.palette.flashlight_stops),
            _WHITE,
        )
        self._panic = _additive_surface(
            radial_sprite(config.panic_radius, PANIC_STOPS),
        )
        self._icons, self._broken_icons = self._load_icons(config.icon_paths)

    def run(self) -> None:
        """Main loop: handle events, update the session, draw."""
        while self.running:
            self.clock.tick(self.fps)
            self._handle_events()
            self.session.update()
            self.draw_frame()

        pygame.quit()

    def draw_frame(self) -> None:
        """Render one frame to the display."""
        if not self.session.paused or not self._world_drawn:
            self._draw_world()
            self._world_drawn = True
        self.screen.fill((0, 0, 0))
        self.screen.blit(self._world, (0, 0))
        if self.session.tracker.shake_strength > 0:
            self._draw_panic()
        self._draw_hud()
        pygame.display.flip()

    # -- Input -------------------------------------------------------------

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        session = self.session
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r:
                    session.reset()
                    self._world_drawn = False
                elif event.key == pygame.K_d:
                    self.show_debug = not self.show_debug
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                session.pointer_down(*event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                session.pointer_up()
            elif event.type == pygame.MOUSEMOTION:
                session.pointer_move(*event.pos)
            elif event.type == pygame.WINDOWLEAVE:
                session.pointer_up()
            elif event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)

    def _resize(self, width: int, height: int) -> None:
        self.session.resize(width, height)
        self._world = pygame.Surface((width, height), pygame.SRCALPHA)
        self._mask = pygame.Surface((width, height), pygame.SRCALPHA)
        self._world_drawn = False

    # -- World layer -------------------------------------------------------

    def _draw_world(self) -> None:
        """Draw visible cells, icons and cursor, then apply the flashlight."""
        session = self.session
        config = session.config
        layer = self._world
        layer.fill((*self.palette.background, 255))

        dx, dy = shake_offset(
            session.rng,
            session.tracker.shake_strength,
            config.shake_amplitude,
        )
        ox = session.camera.x + dx
        oy = session.camera.y + dy
        window = visible_window(
            session.pointer,
            (ox, oy),
            config.cell_size,
            session.grid.rows,
            session.grid.cols,
            config.view_radius,
        )
        cs = config.cell_size
        for r in window.rows:
            for c in window.cols:
                cell = session.grid.cells[r][c]
                x = ox + c * cs
                y = oy + r * cs
                pygame.draw.rect(layer, cell_colour(cell, self.palette), (x, y, cs - 1, cs - 1))
                kind = icon_for(cell)
                if kind is not None:
                    self._draw_icon(layer, kind, x + cs / 2, y + cs / 2)
                if self.show_debug:
                    label = self._label(r, c)
                    layer.blit(label, (x + 2, y + cs - label.get_height() - 2))

        self._draw_cursor(layer)
        self._apply_flashlight(layer)

    def _apply_flashlight(self, layer: pygame.Surface) -> None:
        """Keep only the pixels under the flashlight (destination-in)."""
        pointer = self.session.pointer
        if pointer is None:
            layer.fill((0, 0, 0, 0))
            return
        half = self._flashlight.get_width() / 2
        self._mask.fill((255, 255, 255, 0))
        self._mask.blit(
            self._flashlight,
            (pointer[0] - half, pointer[1] - half),
            special_flags=pygame.BLEND_RGBA_MAX,
        )
        layer.blit(self._mask, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)

    def _draw_panic(self) -> None:
        """Red radial tint around the pointer plus one glitch scanline."""
        pointer = self.session.pointer
        if pointer is not None:
            half = self._panic.get_width() / 2
            self.screen.blit(
                self._panic,
                (pointer[0] - half, pointer[1] - half),
                special_flags=pygame.BLEND_RGB_ADD,
            )
        width, height = self.screen.get_size()
        y, alpha = glitch_line(self.session.rng, height)
        self.screen.fill(
            (int(255 * alpha), 0, 0),
            (0, y, width, 2),
            special_flags=pygame.BLEND_RGB_ADD,
        )

    def _draw_icon(self, layer: pygame.Surface, kind: IconKind, cx: float, cy: float) -> None:
        image = self._icons.get(kind.value)
        if image is not None:
            layer.blit(image, image.get_rect(center=(cx, cy)))
            return
        if kind.value in self._broken_icons:
            return
        colour = _SHAPE_COLOURS[kind]
        h = _ICON_SIZE / 2
        if kind is IconKind.HAZARD:
            points = [(cx, cy - h), (cx - h, cy + h * 0.8), (cx + h, cy + h * 0.8)]
            pygame.draw.polygon(layer, colour, points)
        elif kind is IconKind.POI:
            pygame.draw.circle(layer, colour, (cx, cy), h * 0.8, width=3)
        elif kind is IconKind.LIFE:
            points = [(cx, cy - h), (cx + h * 0.6, cy), (cx, cy + h), (cx - h * 0.6, cy)]
            pygame.draw.polygon(layer, colour, points)
        elif kind is IconKind.RESOURCE:
            pygame.draw.rect(layer, colour, (cx - h / 2, cy - h / 2, h, h))
        else:
            pygame.draw.circle(layer, colour, (cx, cy), h * 0.6)

    def _draw_cursor(self, layer: pygame.Surface) -> None:
        pointer = self.session.pointer
        image = self._icons.get("cursor")
        if pointer is None or image is None:
            return
        layer.blit(image, image.get_rect(center=pointer))

    def _label(self, r: int, c: int) -> pygame.Surface:
        """Cached debug label, drawn at 10% of the text colour."""
        label = self._labels.get((r, c))
        if label is None:
            bg = np.array(self.palette.floor, dtype=np.float64)
            fg = np.array(self.palette.text, dtype=np.float64)
            colour = (bg + 0.1 * (fg - bg)).astype(int).tolist()
            label = self.small_font.render(f"{r},{c}", True, colour)
            self._labels[(r, c)] = label
        return label

    def _load_icons(
        self,
        paths: dict[str, str],
    ) -> tuple[dict[str, pygame.Surface], set[str]]:
        """Load configured icon images; failures are logged and skipped."""
        icons: dict[str, pygame.Surface] = {}
        broken: set[str] = set()
        for kind, path in paths.items():
            size = _CURSOR_SIZE if kind == "cursor" else _ICON_SIZE
            try:
                image = pygame.image.load(Path(path)).convert_alpha()
            except (pygame.error, OSError) as exc:
                logger.warning("Failed to load %s icon from %s: %s", kind, path, exc)
                broken.add(kind)
                continue
            icons[kind] = pygame.transform.smoothscale(image, (size, size))
        return icons, broken

    # -- HUD ---------------------------------------------------------------

    def _draw_hud(self) -> None:
        """Status panel, scan panel, warning banner and end-of-run card."""
        session = self.session
        width, height = self.screen.get_size()

        status = status_lines(session)
        badge = _BADGE.get(session.connection.value, _WHITE)
        panel = self._panel(status, 288, title_colour=badge)
        self.screen.blit(panel, (20, 20))

        hull = session.state.hull
        if hull is not None:
            self._draw_hull_bar(
                hull_fraction(hull, session.state.hull_max),
                20,
                20 + panel.get_height() + 10,
            )

        scan = scan_lines(session.tracker.scan)
        if scan:
            scan_panel = self._panel(["SCAN RESULTS", *scan], 288)
            self.screen.blit(scan_panel, (width - scan_panel.get_width() - 20, 20))

        if session.tracker.panic:
            banner = self.banner_font.render(
                f"WARNING: {session.tracker.warning}".upper(),
                True,
                _WARNING,
            )
            self.screen.blit(banner, banner.get_rect(center=(width / 2, height / 2)))

        card = end_card_lines(session)
        if card:
            card_panel = self._panel(card, 420)
            self.screen.blit(
                card_panel,
                card_panel.get_rect(center=(width / 2, height / 2)),
            )

    def _panel(
        self,
        lines: list[str],
        width: int,
        title_colour: tuple[int, int, int] = _WHITE,
    ) -> pygame.Surface:
        line_height = 18
        panel = pygame.Surface((width, 20 + line_height * len(lines)), pygame.SRCALPHA)
        panel.fill(_PANEL_BG)
        pygame.draw.rect(panel, _PANEL_BORDER, panel.get_rect(), width=1)
        y = 10
        for i, line in enumerate(lines):
            colour = title_colour if i == 0 else self.palette.text
            panel.blit(self.font.render(line, True, colour), (12, y))
            y += line_height
        return panel

    def _draw_hull_bar(self, fraction: float, x: int, y: int) -> None:
        percent = round(fraction * 100)
        if percent > 60:
            colour = (0, 255, 157)
        elif percent > 30:
            colour = (255, 170, 0)
        else:
            colour = (255, 0, 0)
        pygame.draw.rect(self.screen, _PANEL_BORDER, (x, y, 288, 14), width=1)
        pygame.draw.rect(self.screen, colour, (x + 2, y + 2, int(284 * fraction), 10))
        label = self.font.render(f"HULL INTEGRITY {percent}%", True, _WHITE)
        self.screen.blit(label, (x, y + 18))
