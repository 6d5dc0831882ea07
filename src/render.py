import math
import time
import pygame

from engine import Layout
from screens import Screen

BG_COLOR = (17, 17, 17)
GRID_COLOR = (34, 34, 34)
GRID_SIZE = 40
TEXT_WHITE = (255, 255, 255)
TEXT_GRAY = (200, 200, 200)
FOOTER_GRAY = (150, 150, 150)
BUTTON_BLUE = (30, 80, 150)
BACK_RED = (255, 50, 50)
ACCENT_CYAN = (0, 240, 255)

BLOCK_COLOR = (51, 51, 51)
CYLINDER_COLOR = (68, 68, 68)
PISTON_COLOR = (136, 136, 136)
ROD_COLOR = (170, 170, 170)
CRANK_COLOR = (102, 102, 102)

_fonts = {}


def font(size):
    if size not in _fonts: _fonts[size] = pygame.font.SysFont("Arial", size)
    return _fonts[size]


def draw_text(screen, text, x, y, size=20, color=TEXT_WHITE, align="left", alpha=1.0):
    surf = font(size).render(text, True, color)
    if alpha < 1.0: surf.set_alpha(int(255 * max(0.0, alpha)))
    rect = surf.get_rect()
    if align == "center": rect.center = (x, y)
    elif align == "right": rect.topright = (x, y)
    else: rect.topleft = (x, y)
    screen.blit(surf, rect)


def fill_rect(screen, color, rect, alpha=1.0):
    if alpha >= 1.0:
        pygame.draw.rect(screen, color, rect)
        return
    overlay = pygame.Surface((rect[2], rect[3]), pygame.SRCALPHA)
    overlay.fill((*color, int(255 * max(0.0, alpha))))
    screen.blit(overlay, (rect[0], rect[1]))


def loading_dots(progress, scale):
    return "." * (int(progress * scale) % 4)


def draw_grid(screen):
    w, h = screen.get_size()
    offset = (time.time() * 10.0) % GRID_SIZE
    x = -offset
    while x < w:
        pygame.draw.line(screen, GRID_COLOR, (x, 0), (x, h))
        x += GRID_SIZE
    y = -offset
    while y < h:
        pygame.draw.line(screen, GRID_COLOR, (0, y), (w, y))
        y += GRID_SIZE


def draw_splash(screen, ctx):
    cx, cy = ctx.layout.center
    draw_text(screen, "Engine Simulator", cx, cy - 50, 48, TEXT_WHITE, "center", ctx.title_alpha)
    draw_text(screen, "Version 0.2 Beta", cx, cy + 20, 24, TEXT_GRAY, "center", ctx.version_alpha)
    if ctx.version_alpha >= 1.0:
        draw_text(screen, "Loading" + loading_dots(ctx.loading, 3), cx, cy + 60, 24, TEXT_GRAY, "center")


def draw_menu(screen, ctx):
    lay, a = ctx.layout, ctx.alpha
    cx, cy = lay.center
    draw_text(screen, "Engine Simulator 2", cx, cy - 100, 48, TEXT_WHITE, "center", a)
    for b in lay.menu_buttons:
        fill_rect(screen, BUTTON_BLUE, b.rect, a)
        draw_text(screen, b.label, b.rect.centerx, b.rect.centery, 20, TEXT_WHITE, "center", a)
    draw_text(screen, "Gin Studios", 20, lay.height - 36, 16, FOOTER_GRAY, "left", a)
    draw_text(screen, "Version 0.2", lay.width - 20, lay.height - 36, 16, FOOTER_GRAY, "right", a)


def draw_credits(screen, ctx):
    lay, a = ctx.layout, ctx.alpha
    for line in lay.credits_lines:
        draw_text(screen, line.text, line.center[0], line.center[1], line.size, TEXT_WHITE, "center", a)
    back = lay.back_button
    draw_text(screen, back.label, back.rect.centerx, back.rect.centery, 20, BACK_RED, "center", a)


def draw_workshop(screen, ctx):
    cx, cy = ctx.layout.center
    a = ctx.alpha
    draw_text(screen, "Engine Workshop", cx, 40, 32, TEXT_WHITE, "center", a)
    draw_text(screen, "Building your engine...", cx, cy, 24, TEXT_WHITE, "center", a)
    draw_text(screen, "Loading" + loading_dots(ctx.loading, 10), cx, cy + 40, 24, TEXT_WHITE, "center", a)


def _piston(screen, cx, cy, angle, length, position, crank):
    """One cylinder bore along ``angle`` (radians, 0 = straight up) with its piston and rod."""
    ux, uy = math.sin(angle), -math.cos(angle)
    travel = 30 + (position * 50)
    px, py = cx + ux * travel, cy + uy * travel
    base = (cx + ux * 20, cy + uy * 20)
    top = (cx + ux * (length + 10), cy + uy * (length + 10))
    pygame.draw.line(screen, CYLINDER_COLOR, base, top, 40)
    pygame.draw.line(screen, ROD_COLOR, (px, py), crank, 3)
    pygame.draw.line(screen, PISTON_COLOR, (px - ux * 10, py - uy * 10), (px + ux * 10, py + uy * 10), 30)


def draw_engine(screen, eng, center):
    cfg = eng.cfg
    cx, cy = center
    n = cfg.cylinders
    width, height = 300 + (n - 4) * 50, 200
    pygame.draw.rect(screen, BLOCK_COLOR, (cx - width / 2, cy - height / 2, width, height))
    crank = (cx, cy + 50)
    positions = eng.piston_positions

    if cfg.layout is Layout.INLINE:
        spacing = width / (n + 1)
        for i in range(n):
            x = cx - width / 2 + (i + 1) * spacing
            pygame.draw.rect(screen, CYLINDER_COLOR, (x - 20, cy - height / 2 + 30, 40, height - 60))
            py = cy - 30 + (1 - positions[i]) * 50
            pygame.draw.rect(screen, PISTON_COLOR, (x - 15, py - 10, 30, 20))
            pygame.draw.line(screen, ROD_COLOR, (x, py), crank, 3)
    else:
        # V banks at +-45 degrees, boxer banks flat and opposed; cylinders alternate banks
        bank = math.pi / 4 if cfg.layout is Layout.V else math.pi / 2
        per_bank = (n + 1) // 2
        spacing = width / (per_bank + 1)
        for i in range(n):
            row = i // 2
            ox = -width / 2 + (row + 1) * spacing if cfg.layout is Layout.V else 0
            oy = 0 if cfg.layout is Layout.V else -height / 2 + (row + 1) * (height / (per_bank + 1))
            angle = -bank if i % 2 == 0 else bank
            _piston(screen, cx + ox, crank[1] + oy, angle, 100, positions[i], crank)

    pygame.draw.circle(screen, CRANK_COLOR, crank, 30)


def draw_graph(screen, history, rect, label, color=ACCENT_CYAN):
    rect = pygame.Rect(rect)
    pygame.draw.rect(screen, (15, 16, 20), rect)
    pygame.draw.rect(screen, (40, 44, 50), rect, 1)
    draw_text(screen, label, rect.x + 8, rect.y + 5, 14, color)
    draw_text(screen, f"{history.data[-1]:.0f}" if history.data else "0", rect.right - 8, rect.y + 5, 14, TEXT_WHITE, "right")
    values = history.normalized()
    if len(values) < 2: return
    step = rect.w / (history.data.maxlen - 1)
    points = [(rect.x + i * step, rect.bottom - v * rect.h) for i, v in enumerate(values)]
    pygame.draw.lines(screen, color, False, points, 2)


def draw_simulation(screen, ctx, history):
    lay = ctx.layout
    eng = ctx.engine
    if eng is not None:
        draw_engine(screen, eng, lay.center)
        draw_text(screen, f"RPM: {round(eng.rpm)}", 20, 60, 16)
        draw_text(screen, f"Torque: {round(eng.torque)} Nm", 20, 85, 16)
        draw_text(screen, f"Horsepower: {round(eng.horsepower)} HP", 20, 110, 16)
        draw_text(screen, f"Throttle: {eng.throttle * 100:.0f}%", 20, 135, 16)
        if not eng.running:
            draw_text(screen, "Press SPACE to start", lay.center[0], lay.center[1] - 140, 20, ACCENT_CYAN, "center")

    draw_text(screen, "Controls:", lay.width - 260, 20, 16)
    draw_text(screen, "W/S - Increase/Decrease Throttle", lay.width - 260, 45, 16)
    draw_text(screen, "SPACE - Start/Stop Engine", lay.width - 260, 70, 16)

    stop = lay.stop_button
    fill_rect(screen, BACK_RED, stop.rect, 0.7)
    draw_text(screen, stop.label, stop.rect.centerx, stop.rect.centery, 16, TEXT_WHITE, "center")

    draw_graph(screen, history, (lay.width - 320, lay.height - 120, 300, 100), "LIVE RPM")


RENDERERS = {
    Screen.SPLASH: draw_splash,
    Screen.MENU: draw_menu,
    Screen.CREDITS: draw_credits,
    Screen.WORKSHOP: draw_workshop,
}


def render_frame(screen, ctx, history):
    screen.fill(BG_COLOR)
    draw_grid(screen)
    if ctx.screen is Screen.SIMULATION: draw_simulation(screen, ctx, history)
    else: RENDERERS[ctx.screen](screen, ctx)
