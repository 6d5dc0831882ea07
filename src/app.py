import os
import logging
import pygame

from render import render_frame
from screens import AppContext, Screen
from settings import Settings
from telemetry import History, TelemetryLog

log = logging.getLogger("app")

KEY_COMMANDS = {
    pygame.K_w: "throttle_up",
    pygame.K_UP: "throttle_up",
    pygame.K_s: "throttle_down",
    pygame.K_DOWN: "throttle_down",
    pygame.K_SPACE: "ignition",
    pygame.K_ESCAPE: "quit",
}


def load_sound(path):
    if not path: return False
    if not os.path.exists(path):
        log.warning("Sound file %s not found, running silent", path)
        return False
    try:
        pygame.mixer.music.load(path)
        pygame.mixer.music.play(-1)
    except pygame.error as e:
        log.warning("Could not play %s: %s", path, e)
        return False
    log.info("Looping engine sound %s", path)
    return True


def engine_volume(rpm, redline):
    return min(1.0, 0.2 + 0.8 * min(1.0, rpm / redline))


def handle_event(ctx, ev):
    if ev.type == pygame.QUIT:
        ctx.quit()
    elif ev.type == pygame.VIDEORESIZE:
        ctx.resize(ev.w, ev.h)
    elif ev.type == pygame.KEYDOWN and ev.key in KEY_COMMANDS:
        ctx.handle_command(KEY_COMMANDS[ev.key])
    elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
        ctx.handle_click(ev.pos)


def run(settings=None):
    settings = settings or Settings()
    pygame.mixer.pre_init(44100, -16, 2, 512)
    pygame.init()
    screen = pygame.display.set_mode((settings.width, settings.height), pygame.RESIZABLE)
    pygame.display.set_caption("Engine Simulator 2")
    clock = pygame.time.Clock()

    ctx = AppContext(settings.engine, settings.width, settings.height)
    rpm_history = History()
    sound = load_sound(settings.sound_file)
    log.info("Starting frame loop at %d fps", settings.fps)

    with TelemetryLog(settings.log_csv) as telemetry:
        while ctx.running:
            dt = clock.tick(settings.fps) / 1000.0
            for ev in pygame.event.get():
                handle_event(ctx, ev)

            ctx.update(dt)

            eng = ctx.engine
            if ctx.screen is Screen.SIMULATION and eng is not None:
                st = eng.get_state()
                rpm_history.update(st["rpm"])
                telemetry.write(ctx.elapsed, st)
                if sound:
                    pygame.mixer.music.set_volume(engine_volume(st["rpm"], eng.cfg.ecu.redline_rpm) if eng.running else 0.0)
            elif rpm_history.data:
                rpm_history.clear()

            render_frame(screen, ctx, rpm_history)
            pygame.display.flip()

    pygame.quit()
    log.info("Bye")


if __name__ == "__main__":
    run()
