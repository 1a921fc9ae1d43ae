import argparse
import logging
import math
import sys

import pygame

from .config import (
    CHUNK_SIZE,
    FPS,
    SAMPLE_RATE,
    SIZE_MAX,
    SIZE_MIN,
    SPEED_MAX,
    SPEED_MIN,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    Settings,
    load_settings,
    save_settings,
)
from .playback import PlaybackController
from .scheduler import Scheduler
from .session import VisualizerSession
from .sound import SonificationMapper
from .steps import ALGORITHMS, COMPARE, MERGE, SWAP

logger = logging.getLogger(__name__)

# ============================================================
# ========================= UI THEME =========================
# ============================================================

BACKGROUND_COLOR = (5, 5, 10)
BAR_SPACING      = 1

UI_PANEL   = (14, 14, 22)
UI_PANEL2  = (22, 22, 36)
UI_ACCENT  = (255, 55, 55)
UI_TEXT    = (215, 215, 228)
UI_SUBTEXT = (105, 105, 130)
UI_BORDER  = (38, 38, 58)
UI_DIM     = (60, 60, 80)

COMPARE_COLOR = (250, 204, 21)
SWAP_COLOR    = (239, 68, 68)
MERGE_COLOR   = (168, 85, 247)
PIVOT_COLOR   = (34, 211, 238)
SORTED_COLOR  = (60, 200, 100)

LEGEND = [
    ("Unsorted",  (90, 110, 200)),
    ("Comparing", COMPARE_COLOR),
    ("Swapping",  SWAP_COLOR),
    ("Merging",   MERGE_COLOR),
    ("Pivot",     PIVOT_COLOR),
    ("Sorted",    SORTED_COLOR),
]

HELP = "SPACE play/pause   <- -> step   R reset   N new   S shuffle   M mute   1-6 algorithm   ESC quit"

PAD     = 16
TOP     = 64
PANEL_H = 150
BARS_H  = WINDOW_HEIGHT - TOP - PANEL_H - PAD

ALGO_KEYS = list(ALGORITHMS)

# ============================================================
# ======================= COLOR / DRAW =======================
# ============================================================

def value_to_color(value, max_value):
    r = value / max_value if max_value else 0.0
    if r < 0.25: return (0, int(255 * r * 4), 255)
    if r < 0.5:  return (0, 255, int(255 * (1 - (r - 0.25) * 4)))
    if r < 0.75: return (int(255 * (r - 0.5) * 4), 255, 0)
    return (255, int(255 * (1 - (r - 0.75) * 4)), 0)


def bar_colors(step, max_value):
    """Colour per bar for one step: highlights first, value gradient otherwise."""
    if step.sorted:
        return [SORTED_COLOR] * len(step.array)
    colors = [value_to_color(v, max_value) for v in step.array]
    hl = {COMPARE: COMPARE_COLOR, SWAP: SWAP_COLOR, MERGE: MERGE_COLOR}.get(step.type, PIVOT_COLOR)
    for i in step.indices:
        colors[i] = hl
    if step.pivot is not None:
        colors[step.pivot] = PIVOT_COLOR
    return colors


def draw_bars(screen, step, max_value):
    n = len(step.array)
    if not n: return
    bw = (WINDOW_WIDTH - 2*PAD) / n
    for i, (v, c) in enumerate(zip(step.array, bar_colors(step, max_value))):
        h = (v / max_value) * BARS_H if max_value else 0
        pygame.draw.rect(screen, c, (PAD + i*bw, TOP + BARS_H - h, max(1, bw - BAR_SPACING), h))


def draw_header(screen, fonts, session):
    ctl  = session.controller
    info = session.info
    screen.blit(fonts['title'].render(info.name, True, UI_TEXT), (PAD, 14))
    total = max(1, len(ctl.steps) - 1)
    status = f"{ctl.status.value.upper()}   step {ctl.current_step}/{total}   {ctl.speed} ms/step"
    st = fonts['mono_sm'].render(status, True, UI_SUBTEXT)
    screen.blit(st, (WINDOW_WIDTH - PAD - st.get_width(), 22))
    # progress line
    frac = ctl.current_step / total
    pygame.draw.line(screen, UI_BORDER, (PAD, 52), (WINDOW_WIDTH-PAD, 52), 2)
    pygame.draw.line(screen, UI_ACCENT, (PAD, 52), (PAD + int(frac * (WINDOW_WIDTH - 2*PAD)), 52), 2)


def draw_panel(screen, fonts, session, sliders, muted):
    y0 = WINDOW_HEIGHT - PANEL_H - 4
    panel = pygame.Rect(PAD - 6, y0, WINDOW_WIDTH - 2*PAD + 12, PANEL_H)
    pygame.draw.rect(screen, UI_PANEL,  panel, border_radius=7)
    pygame.draw.rect(screen, UI_BORDER, panel, 1, border_radius=7)

    for sl in sliders.values():
        sl.draw(screen, fonts)

    info = session.info
    x = PAD + 300
    lines = [
        f"Best: {info.best}   Average: {info.average}   Worst: {info.worst}   Space: {info.space}",
        info.description,
    ]
    stats = session.stats()
    lines.append(f"{stats['comparisons']} comparisons   {stats['swaps']} swaps   "
                 f"{stats['merges']} writes   {stats['pivots']} pivots")
    for k, ln in enumerate(lines):
        screen.blit(fonts['small'].render(ln, True, UI_SUBTEXT), (x, y0 + 12 + k*18))

    lx = x
    for label, color in LEGEND:
        pygame.draw.rect(screen, color, (lx, y0 + 78, 10, 10))
        t = fonts['small'].render(label, True, UI_SUBTEXT)
        screen.blit(t, (lx + 14, y0 + 75))
        lx += t.get_width() + 30
    snd = "Sound: OFF" if muted else "Sound: ON"
    screen.blit(fonts['small'].render(snd, True, UI_ACCENT if not muted else UI_DIM), (lx + 10, y0 + 75))

    screen.blit(fonts['mono_sm'].render(HELP, True, UI_DIM), (x, y0 + PANEL_H - 24))


# ============================================================
# ========================= UI WIDGETS =======================
# ============================================================

class Slider:
    """Single-knob slider; handle() returns True when the value changed."""
    KNOB_RADIUS = 6

    def __init__(self, x, y, w, lo, hi, val, label, is_int=False, fmt="{}"):
        self.x, self.y, self.w = x, y, w
        self.lo, self.hi = lo, hi
        self.value = val
        self.label = label
        self.is_int = is_int
        self.fmt = fmt
        self.drag = False
        self.track = pygame.Rect(x, y+18, w, 4)
        self.hit = pygame.Rect(x-5, y, w+10, 38)

    def _r(self):
        return (self.value - self.lo) / (self.hi - self.lo)

    def _kx(self):
        return int(self.x + self._r() * self.w)

    def handle(self, ev):
        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if math.hypot(ev.pos[0]-self._kx(), ev.pos[1]-self.track.centery) < 14 \
               or self.hit.collidepoint(ev.pos):
                self.drag = True
                return self._set(ev.pos[0])
        elif ev.type == pygame.MOUSEBUTTONUP:
            self.drag = False
        elif ev.type == pygame.MOUSEMOTION and self.drag:
            return self._set(ev.pos[0])
        return False

    def _set(self, mx):
        r = max(0.0, min(1.0, (mx - self.x) / self.w))
        raw = self.lo + r * (self.hi - self.lo)
        new = int(round(raw)) if self.is_int else round(raw, 2)
        changed, self.value = new != self.value, new
        return changed

    def draw(self, s, fonts):
        s.blit(fonts['small'].render(f"{self.label}:  {self.fmt.format(self.value)}", True, UI_SUBTEXT),
               (self.x, self.y))
        pygame.draw.rect(s, UI_BORDER, self.track, border_radius=2)
        fw = int(self._r() * self.w)
        if fw > 0: pygame.draw.rect(s, UI_ACCENT, (self.x, self.track.y, fw, 4), border_radius=2)
        kx, ky = self._kx(), self.track.centery
        pygame.draw.circle(s, UI_PANEL2, (kx, ky), self.KNOB_RADIUS)
        pygame.draw.circle(s, UI_ACCENT, (kx, ky), self.KNOB_RADIUS, 2)
        pygame.draw.circle(s, UI_ACCENT, (kx, ky), 2)


def build_sliders(settings):
    y0 = WINDOW_HEIGHT - PANEL_H + 8
    w  = 250
    return {
        "size":   Slider(PAD + 8, y0,      w, SIZE_MIN, SIZE_MAX, settings.size, "Array Size", is_int=True),
        "speed":  Slider(PAD + 8, y0 + 44, w, SPEED_MIN, SPEED_MAX, settings.speed, "Delay", is_int=True,
                         fmt="{} ms"),
        "volume": Slider(PAD + 8, y0 + 88, w, 0.0, 1.0, settings.volume, "Volume", fmt="{:.2f}"),
    }


# ============================================================
# ========================= INPUT ============================
# ============================================================

def handle_key(key, session, sonifier):
    """Apply one keyboard shortcut. Returns False when the app should quit."""
    ctl = session.controller
    if key == pygame.K_ESCAPE:
        return False
    if key == pygame.K_SPACE:
        if ctl.is_finished: ctl.reset()
        ctl.toggle()
    elif key == pygame.K_RIGHT: ctl.step(1)
    elif key == pygame.K_LEFT:  ctl.step(-1)
    elif key == pygame.K_r:     ctl.reset()
    elif key == pygame.K_n:     session.new_array()
    elif key == pygame.K_s:     session.shuffle()
    elif key == pygame.K_m:     sonifier.toggle_mute()
    elif key == pygame.K_UP:    ctl.set_speed(ctl.speed - 10)
    elif key == pygame.K_DOWN:  ctl.set_speed(ctl.speed + 10)
    elif pygame.K_1 <= key < pygame.K_1 + len(ALGO_KEYS):
        session.select_algorithm(ALGO_KEYS[key - pygame.K_1])
    return True


# ============================================================
# ========================= MAIN =============================
# ============================================================

def build_fonts():
    def tf(names, sz):
        for n in names:
            try: return pygame.font.SysFont(n, sz)
            except Exception: pass
        return pygame.font.SysFont(None, sz)
    mono = ["Consolas", "Courier New", "Lucida Console"]
    sans = ["Segoe UI", "Tahoma", "Arial"]
    return dict(title=tf(mono, 26), small=tf(sans, 13), mono_sm=tf(mono, 12))


def build_parser():
    p = argparse.ArgumentParser(prog="sortscope", description="Step-by-step sorting visualizer with sound.")
    p.add_argument("--algorithm", choices=ALGO_KEYS, help="algorithm to start with")
    p.add_argument("--size", type=int, help=f"array size ({SIZE_MIN}-{SIZE_MAX})")
    p.add_argument("--speed", type=int, help=f"delay per step in ms ({SPEED_MIN}-{SPEED_MAX})")
    p.add_argument("--volume", type=float, help="volume 0..1")
    p.add_argument("--mute", action="store_true", help="start muted")
    p.add_argument("--log-level", default="WARNING", help="logging level (default WARNING)")
    return p


def apply_args(settings, args):
    for name in ("algorithm", "size", "speed", "volume"):
        v = getattr(args, name)
        if v is not None:
            setattr(settings, name, v)
    if args.mute:
        settings.muted = True
    return settings.normalized()


def run(settings):
    pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, CHUNK_SIZE)
    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    pygame.display.set_caption("SortScope")
    fonts = build_fonts(); clock = pygame.time.Clock()

    sonifier   = SonificationMapper(volume=settings.volume, muted=settings.muted)
    controller = PlaybackController(sonifier, Scheduler(), speed=settings.speed)
    algorithm  = settings.algorithm if settings.algorithm in ALGORITHMS else ALGO_KEYS[0]
    session    = VisualizerSession(controller, size=settings.size, algorithm=algorithm)
    sliders    = build_sliders(settings)

    running = True
    try:
        while running:
            clock.tick(FPS)
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False; break
                if ev.type == pygame.KEYDOWN and not handle_key(ev.key, session, sonifier):
                    running = False; break
                if sliders["size"].handle(ev):
                    session.new_array(sliders["size"].value)
                if sliders["speed"].handle(ev):
                    controller.set_speed(sliders["speed"].value)
                if sliders["volume"].handle(ev):
                    sonifier.set_volume(sliders["volume"].value)
            sliders["speed"].value = controller.speed

            controller.scheduler.run_due()

            screen.fill(BACKGROUND_COLOR)
            if controller.current is not None:
                draw_bars(screen, controller.current, max(session.array, default=0))
            draw_header(screen, fonts, session)
            draw_panel(screen, fonts, session, sliders, sonifier.is_muted())
            pygame.display.flip()
    finally:
        save_settings(Settings(session.algorithm, session.size, controller.speed,
                               sonifier.get_volume(), sonifier.is_muted()))
        sonifier.dispose()
        pygame.quit()


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = apply_args(load_settings(), args)
    logger.info("Starting with %s", settings)
    run(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
