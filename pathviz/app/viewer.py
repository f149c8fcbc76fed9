# pathviz/app/viewer.py
#!/usr/bin/env python3
"""
A* Visualizer: paint walls, move the markers, watch the search replay.

- Mouse:
    left click / drag on the grid -> edit according to the active mode
- Keyboard:
    [W]/[S]/[E]  -> mode: wall / start / end
    [SPACE]      -> run A*
    [C]          -> clear visited cells (keeps walls)
    [R]          -> reset the whole grid
    [+]/[-]      -> visitation speed (ms per step)
    [Q]/[ESC]    -> quit

Settings: see pathviz.app.settings (ENV or --speed= / --path-speed= / --log-level=).
"""

# --- bootstrap import path so `from pathviz...` works when run as a script ---
import sys
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -----------------------------------------------------------------------------

import logging
from typing import List, Tuple, Optional
import pygame

from pathviz.app.settings import Settings, resolve_settings, clamp_speed
from pathviz.core.animation import Animation, AnimationFrame, schedule_animation, VISIT
from pathviz.core.astar import SearchEngine
from pathviz.core.controller import InteractionController
from pathviz.core.grid import Grid, create_grid
from pathviz.core.types import Coord, SearchResult

logger = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 300            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
CELL_BORDER = (209,213,219)
START_GREEN = ( 34,197, 94)
END_RED     = (239, 68, 68)
WALL_DARK   = ( 31, 41, 55)
PATH_YELLOW = (250,204, 21)
VISIT_BLUE  = (147,197,253)

BG_TOP      = (24, 26, 32)
BG_BOTTOM   = (36, 40, 48)
CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)
OK_GREEN    = (134,239,172)
WARN_RED    = (252,165,165)

LEGEND = [
    ("Start", START_GREEN),
    ("End", END_RED),
    ("Wall", WALL_DARK),
    ("Visited", VISIT_BLUE),
    ("Path", PATH_YELLOW),
]


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, settings: Optional[Settings] = None):
        pygame.init()

        self.settings = settings or Settings()
        s = self.settings
        self.grid: Grid = create_grid(s.rows, s.cols, s.start, s.end)
        self.engine = SearchEngine()
        self.animation: Optional[Animation] = None
        self.controller = InteractionController(self.grid, is_busy=self.is_busy)

        self.cell_size = self._auto_cell_size(self.grid)
        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 24)

        grid_px_w = GRID_MARGIN*2 + self.grid.cols * self.cell_size
        grid_px_h = GRID_MARGIN*2 + self.grid.rows * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 620)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("A* Pathfinding Visualizer")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.clock = pygame.time.Clock()
        self.speed_ms = clamp_speed(s.speed_ms)
        self.mouse_down = False
        self.state = "Idle"
        self._visited_shown = 0
        self._path_shown = 0
        self._last_metrics = {}

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)

        cs_by_w = avail_w // self.grid.cols
        cs_by_h = avail_h // self.grid.rows
        self.cell_size = int(max(8, min(cs_by_w, cs_by_h)))

        grid_plate_w = self.grid.cols * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.grid.rows * self.cell_size + 2 * GRID_MARGIN

        left_x = max(0, (win_w - (grid_plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)

        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right),
                                       win_h)
        self._build_buttons()

    def _auto_cell_size(self, grid: Grid) -> int:
        target_w = 1280 - PANEL_W - GRID_MARGIN*2
        return max(12, min(CELL_SIZE_DEFAULT, target_w // grid.cols))

    def _cell_at(self, pos: Tuple[int, int]) -> Optional[Coord]:
        ox, oy = self._grid_origin
        x, y = pos
        if x < ox or y < oy:
            return None
        c = ((y - oy) // self.cell_size, (x - ox) // self.cell_size)
        return c if self.grid.in_bounds(c) else None

    # ---------- loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.animation is not None:
                self.animation.tick(pygame.time.get_ticks())
            self._draw()
            self.clock.tick(60)

    def is_busy(self) -> bool:
        return self.engine.is_running or (self.animation is not None and self.animation.active)

    def _quit(self):
        pygame.quit(); sys.exit(0)

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self._quit()
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    self._quit()
                elif e.key == pygame.K_SPACE:
                    self._run_search()
                elif e.key == pygame.K_c:
                    self._clear_visited()
                elif e.key == pygame.K_r:
                    self._reset_grid()
                elif e.key == pygame.K_w:
                    self._set_mode("wall")
                elif e.key == pygame.K_s:
                    self._set_mode("start")
                elif e.key == pygame.K_e:
                    self._set_mode("end")
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+5)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-5)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                if any(b.handle_mouse(e) for b in self._buttons):
                    continue
                c = self._cell_at(e.pos)
                if c is not None:
                    self.mouse_down = True
                    self.controller.press(c)
            elif e.type == pygame.MOUSEMOTION:
                for b in self._buttons:
                    b.handle_mouse(e)
                if self.mouse_down:
                    c = self._cell_at(e.pos)
                    if c is not None:
                        self.controller.drag(c)
            elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                self.mouse_down = False
                self.controller.release()

    # ---------- actions ----------
    def _run_search(self) -> SearchResult:
        if self.animation is not None:
            self.animation.cancel()
        self._visited_shown = 0
        self._path_shown = 0
        result = self.engine.run(self.grid)
        self._last_metrics = result.metrics
        self.state = "Searching"
        self.animation = schedule_animation(
            self.grid, result.visited_order, result.path,
            self.speed_ms, self.settings.path_ms,
            on_step=self._on_anim_step,
            on_done=lambda cancelled: self._on_anim_done(result, cancelled),
            clock=pygame.time.get_ticks,
        )
        return result

    def _on_anim_step(self, frame: AnimationFrame):
        if frame.phase == VISIT:
            self._visited_shown = frame.index + 1
        else:
            self.state = "Tracing path"
            self._path_shown = frame.index + 1

    def _on_anim_done(self, result: SearchResult, cancelled: bool):
        if cancelled:
            self.state = "Stopped"
        elif result.found:
            self.state = "Path found!"
        else:
            self.state = "No path"

    def _clear_visited(self):
        if self.animation is not None:
            self.animation.cancel()
            self.animation = None
        self.grid.reset_search_fields()
        self._visited_shown = self._path_shown = 0
        self._last_metrics = {}
        self.state = "Idle"

    def _reset_grid(self):
        self._clear_visited()
        self.grid.reset(self.settings.start, self.settings.end)

    def _set_mode(self, mode: str):
        self.controller.set_mode(mode)
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.speed_ms = clamp_speed(self.speed_ms + dv)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(BG_TOP[i] + (BG_BOTTOM[i]-BG_TOP[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_color(self, row: int, col: int) -> Tuple[int, int, int]:
        cell = self.grid.cells[row][col]
        if cell.is_start:
            return START_GREEN
        if cell.is_end:
            return END_RED
        if cell.is_wall:
            return WALL_DARK
        if cell.is_path:
            return PATH_YELLOW
        if cell.is_visited:
            return VISIT_BLUE
        return WHITE

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        for row in range(self.grid.rows):
            for col in range(self.grid.cols):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                pygame.draw.rect(self.screen, self._cell_color(row, col), rect)
                pygame.draw.rect(self.screen, CELL_BORDER, rect, 1)

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            rect = pygame.Rect(x, y, w, h)
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Draw Walls",  lambda: self._set_mode("wall"),  togglable=True, store_as="btn_mode_wall");  y += h + gap
        add("Move Start",  lambda: self._set_mode("start"), togglable=True, store_as="btn_mode_start"); y += h + gap
        add("Move End",    lambda: self._set_mode("end"),   togglable=True, store_as="btn_mode_end");   y += h + gap
        add("Run A*", self._run_search);              y += h + gap
        add("Clear Visited", self._clear_visited);    y += h + gap
        add("Reset Grid", self._reset_grid);          y += h + gap

        faster_rect = pygame.Rect(x, y, (w-8)//2, h)
        slower_rect = pygame.Rect(x + (w-8)//2 + 8, y, (w-8)//2, h)
        self._buttons.append(UIButton("Slower", slower_rect, lambda: self._bump_speed(+5)))
        self._buttons.append(UIButton("Faster", faster_rect, lambda: self._bump_speed(-5)))

        self._refresh_active_states()

    def _refresh_active_states(self):
        mode = self.controller.mode
        for name, m in (("btn_mode_wall", "wall"), ("btn_mode_start", "start"), ("btn_mode_end", "end")):
            if hasattr(self, name):
                getattr(self, name).set_active(mode == m)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("A* Search", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Expanded: {m.get('popped', 0)}")
        line(f"Visited: {self._visited_shown}/{m.get('visited', 0)}")
        line(f"Path Len: {self._path_shown}/{m.get('path_len', 0)}")
        line(f"Mode: {self.controller.mode}")
        line(f"Speed: {self.speed_ms} ms/step")
        status_color = OK_GREEN if self.state == "Path found!" else WARN_RED if self.state == "No path" else TEXT_LIGHT
        line(f"Status: {self.state}", color=status_color)

        for b in self._buttons:
            b.draw(self.screen, self.font)

        # legend under the buttons
        lx = rb.x + 16
        ly = self._buttons[-1].rect.bottom + 18 if self._buttons else rb.y + 560
        for label, color in LEGEND:
            pygame.draw.rect(self.screen, color, pygame.Rect(lx, ly + 2, 14, 14))
            txt = self.font_small.render(label, True, TEXT_LIGHT)
            self.screen.blit(txt, (lx + 20, ly))
            ly += txt.get_height() + 4


# ---------- main ----------
def main():
    settings = resolve_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("starting viewer: %dx%d grid, %d ms/visit, %d ms/path",
                settings.rows, settings.cols, settings.speed_ms, settings.path_ms)
    Viewer(settings).run()

if __name__ == "__main__":
    main()
