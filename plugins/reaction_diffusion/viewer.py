"""
Interactive Pygame Viewer for Gray-Scott Reaction-Diffusion

One simulation cell per canvas pixel. The grid is sized once at startup and
the window is not resizable. Each frame runs `updates_per_step`
engine steps, then maps (a - b) onto a matcha-green / white gradient.

Controls:
  SPACE       Pause / Resume
  R           Reset with the centered seed square
  I           Invert colors
  TAB         Toggle control panel
  S           Save screenshot
  H           Toggle HUD overlay
  1-5         Select preset
  Q / ESC     Quit
  Mouse L     Inject a blob of chemical B (on canvas area)
"""

import logging
import os
import time

import numpy as np
import pygame

from .colormaps import field_to_rgb, palette_colors
from .controls import THEME, ControlPanel
from .gray_scott import GrayScott
from .params import DEFAULT_PARAMS, Params
from .presets import PRESET_ORDER, PRESETS, get_preset, preset_params

logger = logging.getLogger(__name__)

PANEL_WIDTH = 280
HUD_HEIGHT = 24


class Viewer:
    def __init__(self, width=500, height=500, start_preset="default",
                 params=None, inverted=False):
        self.canvas_w = width
        self.canvas_h = height
        self.panel_visible = True
        self.running = True
        self.paused = False
        self.show_hud = True
        self.inverted = inverted
        self.fps_history = []

        self.preset_key = start_preset
        if not isinstance(params, Params):
            params = DEFAULT_PARAMS.updated(**(params or {}))
        # Preset feed/kill go in before the first seed
        self.engine = GrayScott(width, height,
                                params.updated(**preset_params(start_preset)))

        self.panel = None
        self.sliders = {}
        self.preset_buttons = None
        self.invert_toggle = None
        self._rgb = np.empty((height, width, 3), dtype=np.uint8)

    @property
    def total_w(self):
        return self.canvas_w + (PANEL_WIDTH if self.panel_visible else 0)

    # ------------------------------------------------------------------
    # Panel
    # ------------------------------------------------------------------

    def _build_panel(self):
        """Build the control panel: presets, parameter sliders, actions."""
        panel = ControlPanel(self.canvas_w, 0, PANEL_WIDTH, self.canvas_h)
        self.sliders = {}

        panel.add_section("PRESETS")
        preset_names = [PRESETS[k]["name"] for k in PRESET_ORDER]
        preset_idx = PRESET_ORDER.index(self.preset_key) if self.preset_key in PRESET_ORDER else 0
        self.preset_buttons = panel.add_button_row(
            preset_names, selected=preset_idx,
            on_select=self._on_preset_select
        )

        section = None
        params = self.engine.get_params()
        for sdef in GrayScott.get_slider_defs():
            if sdef["section"] != section:
                section = sdef["section"]
                panel.add_section(section)
            self.sliders[sdef["key"]] = panel.add_slider(
                sdef["label"], sdef["min"], sdef["max"], params[sdef["key"]],
                fmt=sdef.get("fmt", ".3f"),
                step=sdef.get("step"),
                on_change=self._make_param_callback(sdef["key"])
            )

        panel.add_spacer(4)
        self.invert_toggle = panel.add_toggle(
            "Invert Colors  [I]", active=self.inverted,
            on_toggle=self._on_invert
        )
        panel.add_button("Reset Simulation  [R]", on_click=self._on_reset)
        panel.add_button("Screenshot  [S]", on_click=self._save_screenshot)

        self.panel = panel

    def _sync_sliders_from_engine(self):
        params = self.engine.get_params()
        for key, slider in self.sliders.items():
            slider.value = params[key]

    def _make_param_callback(self, key):
        """Create a callback that updates a single engine parameter.

        Takes effect from the next step. Pattern size only matters at
        the next reset, so changing it does not reseed.
        """
        def callback(val):
            self.engine.set_params(**{key: val})
        return callback

    def _on_preset_select(self, idx, name):
        if idx < len(PRESET_ORDER):
            self._apply_preset(PRESET_ORDER[idx])

    def _apply_preset(self, key):
        self.preset_key = key
        self.engine.set_params(**preset_params(key))
        self.engine.reset()
        if self.preset_buttons:
            self.preset_buttons.select(PRESET_ORDER.index(key))
        self._sync_sliders_from_engine()
        logger.debug("Applied preset %s", key)

    def _on_reset(self):
        self.engine.reset()

    def _on_invert(self, active):
        self.inverted = active

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def canvas_to_grid(self, mx, my):
        """Map a window position to grid coordinates, or None off-canvas."""
        if not (0 <= mx < self.canvas_w and 0 <= my < self.canvas_h):
            return None
        gx = int(mx * self.engine.width / self.canvas_w)
        gy = int(my * self.engine.height / self.canvas_h)
        return gx, gy

    def handle_click(self, pos):
        """Inject B at a canvas click. Returns True if it hit the canvas."""
        cell = self.canvas_to_grid(*pos)
        if cell is None:
            return False
        self.engine.inject(*cell)
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_rgb(self):
        background, foreground = palette_colors(self.inverted)
        return field_to_rgb(self.engine.read_field(), background, foreground,
                            out=self._rgb)

    def _render_frame(self):
        rgb = self.render_rgb()
        return pygame.surfarray.make_surface(rgb.swapaxes(0, 1).copy())

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        stats = self.engine.stats
        preset = get_preset(self.preset_key)
        line = (f"{GrayScott.engine_label} - {preset['name']}  |  Gen: {stats['generation']:,}  |  "
                f"B: {stats['alive_pct']:.1f}%  |  FPS: {fps:.0f}")
        if self.paused:
            line = "[PAUSED]  " + line

        bg_surface = pygame.Surface((self.canvas_w, HUD_HEIGHT), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))

        text_surface = self.hud_font.render(line, True, THEME["text_bright"])
        screen.blit(text_surface, (10, 6))

    def _save_screenshot(self):
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"rd_{self.preset_key}_{timestamp}.png")

        pygame.image.save(self._render_frame(), path)
        logger.info("Screenshot saved: %s", path)
        print(f"Screenshot saved: {path}")

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.total_w, self.canvas_h))
        pygame.display.set_caption("Reaction-Diffusion")
        clock = pygame.time.Clock()

        self.hud_font = pygame.font.SysFont("menlo", 13)
        self.panel_font = pygame.font.SysFont("arial", 13)

        self._build_panel()

        while self.running:
            frame_start = time.time()

            # Input is applied between frames, never during a step
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    continue

                if event.type == pygame.KEYDOWN:
                    screen = self._handle_keydown(event, screen)
                    continue

                if self.panel_visible and self.panel:
                    if self.panel.handle_event(event):
                        continue

                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)

            if not self.paused:
                self.engine.advance_frame()

            screen.fill(THEME["bg"])
            screen.blit(self._render_frame(), (0, 0))

            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)

            self._draw_hud(screen, avg_fps)

            if self.panel_visible and self.panel:
                self.panel.x = self.canvas_w
                self.panel.draw(screen, self.panel_font)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _handle_keydown(self, event, screen):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.paused = not self.paused

        elif key == pygame.K_r:
            self._on_reset()

        elif key == pygame.K_i:
            if self.invert_toggle:
                self.invert_toggle.set_active(not self.inverted)
            else:
                self.inverted = not self.inverted

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_TAB:
            self.panel_visible = not self.panel_visible
            screen = pygame.display.set_mode((self.total_w, self.canvas_h))

        elif key == pygame.K_s:
            self._save_screenshot()

        # Preset selection (1-5)
        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self._apply_preset(PRESET_ORDER[idx])

        return screen
