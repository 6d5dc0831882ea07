import logging
from dataclasses import dataclass
from enum import Enum, auto

from engine import EngineConfig, EngineSimulation
from layout import compute_layout, button_at

log = logging.getLogger("screens")

FADE_RATE = 1.2           # alpha per second
SPLASH_FADE_RATE = 0.5
SPLASH_LOAD_RATE = 0.3
WORKSHOP_LOAD_RATE = 0.6
THROTTLE_STEP = 0.1


class Screen(Enum):
    SPLASH = auto()
    MENU = auto()
    CREDITS = auto()
    WORKSHOP = auto()
    SIMULATION = auto()


FADE_OUT, FADE_IN = "out", "in"


@dataclass
class Transition:
    target: Screen
    direction: str
    started_at: float


class ScreenFlow:
    """Current screen plus one fade descriptor driving ``alpha``.

    A request replaces whatever fade is in progress, so there is never more
    than one process moving alpha.
    """

    def __init__(self, screen=Screen.SPLASH, alpha=0.0, rate=FADE_RATE):
        self.current = screen
        self.alpha = alpha
        self.rate = rate
        self.transition = None

    @property
    def pending_target(self):
        if self.transition and self.transition.direction == FADE_OUT:
            return self.transition.target
        return None

    def request_transition(self, target, now=0.0):
        if self.transition:
            log.debug("Replacing transition to %s with %s", self.transition.target.name, target.name)
        self.transition = Transition(target, FADE_OUT, now)

    def tick(self, dt):
        """Advance the fade. Returns ``(old, new)`` on the frame the screen swaps, else None."""
        t = self.transition
        if t is None: return None
        step = self.rate * max(0.0, dt)
        if t.direction == FADE_OUT:
            self.alpha = max(0.0, self.alpha - step)
            if self.alpha > 0.0: return None
            old, self.current = self.current, t.target
            t.direction = FADE_IN
            log.info("Screen %s -> %s", old.name, self.current.name)
            return old, self.current
        self.alpha = min(1.0, self.alpha + step)
        if self.alpha >= 1.0: self.transition = None
        return None


class AppContext:
    """Everything the frame loop mutates: screen flow, splash/loading progress, the engine."""

    def __init__(self, config=None, width=1280, height=720):
        self.config = config or EngineConfig()
        self.flow = ScreenFlow()
        self.layout = compute_layout(width, height)
        self.engine = None
        self.title_alpha = 0.0
        self.version_alpha = 0.0
        self.loading = 0.0
        self.elapsed = 0.0
        self.running = True

    @property
    def screen(self):
        return self.flow.current

    @property
    def alpha(self):
        return self.flow.alpha

    def resize(self, width, height):
        self.layout = compute_layout(width, height)

    def goto(self, target):
        self.flow.request_transition(target, self.elapsed)

    def quit(self):
        log.info("Quit requested")
        self.running = False

    def update(self, dt):
        dt = max(0.0, dt)
        self.elapsed += dt
        swapped = self.flow.tick(dt)
        if swapped: self._on_enter(*swapped)

        screen = self.flow.current
        if screen is Screen.SPLASH: self._update_splash(dt)
        elif screen is Screen.WORKSHOP: self._update_workshop(dt)
        elif screen is Screen.SIMULATION and self.engine: self.engine.update(dt)

    def _on_enter(self, old, new):
        if old is Screen.SIMULATION and self.engine:
            self.engine.stop()
            self.engine = None
        if new is Screen.WORKSHOP:
            self.loading = 0.0
        elif new is Screen.SIMULATION:
            self.engine = EngineSimulation(self.config)
            log.info("Built %d-cylinder %s engine, %.0f cc",
                     self.config.cylinders, self.config.layout.value, self.config.displacement_cc)

    def _update_splash(self, dt):
        self.title_alpha = min(1.0, self.title_alpha + dt * SPLASH_FADE_RATE)
        if self.title_alpha >= 1.0:
            self.version_alpha = min(1.0, self.version_alpha + dt * SPLASH_FADE_RATE)
        if self.version_alpha < 1.0: return
        self.loading += dt * SPLASH_LOAD_RATE
        if self.loading >= 1.0:
            self.loading = 0.0
            if self.flow.pending_target is not Screen.MENU: self.goto(Screen.MENU)

    def _update_workshop(self, dt):
        if self.flow.pending_target is Screen.SIMULATION: return
        self.loading = min(1.0, self.loading + dt * WORKSHOP_LOAD_RATE)
        if self.loading >= 1.0: self.goto(Screen.SIMULATION)

    def handle_command(self, cmd):
        if cmd == "quit":
            self.quit()
            return
        if self.flow.current is not Screen.SIMULATION or self.engine is None: return
        # The engine is on its way out while the screen fades away
        if self.flow.pending_target is not None: return
        if cmd == "throttle_up": self.engine.set_throttle(THROTTLE_STEP)
        elif cmd == "throttle_down": self.engine.set_throttle(-THROTTLE_STEP)
        elif cmd == "ignition": self.engine.toggle()

    def handle_click(self, pos):
        lay, screen = self.layout, self.flow.current
        if screen is Screen.MENU:
            button = button_at(lay.menu_buttons, pos)
        elif screen is Screen.CREDITS:
            button = button_at((lay.back_button,), pos)
        elif screen is Screen.SIMULATION:
            button = button_at((lay.stop_button,), pos)
        else:
            button = None
        if button is None: return
        log.debug("Clicked %s on %s", button.label, screen.name)
        if button.action == "play": self.goto(Screen.WORKSHOP)
        elif button.action == "credits": self.goto(Screen.CREDITS)
        elif button.action == "quit": self.quit()
        elif button.action == "back": self.goto(Screen.MENU)
        elif button.action == "stop":
            if self.engine: self.engine.stop()
            self.goto(Screen.MENU)
