import math
import logging
import numpy as np
from dataclasses import dataclass, field, replace
from enum import Enum

log = logging.getLogger("engine")

TORQUE_TO_HP = 5252.0
REFERENCE_STROKE_MM = 86.0


class Layout(Enum):
    INLINE = "inline"
    V = "v"
    BOXER = "boxer"


class Aspiration(Enum):
    NATURAL = "naturally-aspirated"
    TURBO = "turbo"
    SUPERCHARGED = "supercharged"


ASPIRATION_FACTOR = {
    Aspiration.TURBO: 1.3,
    Aspiration.SUPERCHARGED: 1.2,
    Aspiration.NATURAL: 1.0,
}


@dataclass(frozen=True)
class PistonSpec:
    diameter_mm: float = 86.0
    stroke_mm: float = 86.0
    rings: int = 3
    material: str = "aluminum"


@dataclass(frozen=True)
class ExhaustSpec:
    diameter_mm: float = 50.0
    muffler: bool = True
    turbo: bool = False


@dataclass(frozen=True)
class EcuLimits:
    idle_rpm: float = 800.0
    redline_rpm: float = 7000.0
    rev_limit_rpm: float = 7500.0


@dataclass(frozen=True)
class EngineConfig:
    stroke_type: int = 4
    cylinders: int = 4
    layout: Layout = Layout.INLINE
    displacement_cc: float = 2000.0
    piston: PistonSpec = field(default_factory=PistonSpec)
    fuel_type: str = "gasoline"
    aspiration: Aspiration = Aspiration.NATURAL
    valves_per_cylinder: int = 2
    exhaust: ExhaustSpec = field(default_factory=ExhaustSpec)
    ecu: EcuLimits = field(default_factory=EcuLimits)

    def __post_init__(self):
        # Accept the string spellings ("turbo", "v"); unknown values raise ValueError
        object.__setattr__(self, "layout", Layout(self.layout))
        object.__setattr__(self, "aspiration", Aspiration(self.aspiration))
        # Validate the static build; the running model itself never raises
        if self.stroke_type not in (2, 4):
            raise ValueError(f"stroke_type must be 2 or 4, got {self.stroke_type}")
        if self.cylinders < 1:
            raise ValueError("Number of cylinders must be positive")
        if self.displacement_cc <= 0:
            raise ValueError("Displacement must be positive")
        e = self.ecu
        if not (0 <= e.idle_rpm <= e.redline_rpm <= e.rev_limit_rpm) or e.redline_rpm <= 0:
            raise ValueError(
                f"ECU limits must satisfy idle <= redline <= rev limit, redline > 0 "
                f"({e.idle_rpm}, {e.redline_rpm}, {e.rev_limit_rpm})"
            )

    @property
    def aspiration_factor(self):
        return ASPIRATION_FACTOR[self.aspiration]

    def with_overrides(self, **changes):
        """Copy of this config with top-level fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def piston_positions(cycle_position, cylinders):
    """Rectified-sine piston displacement for each cylinder, evenly spaced in crank phase."""
    phases = np.mod(np.arange(cylinders) / cylinders, 1.0)
    return np.abs(np.sin((cycle_position + phases) * 2.0 * math.pi))


def torque_estimate(cfg, throttle):
    displacement_effect = cfg.displacement_cc / 1000.0
    stroke_effect = cfg.piston.stroke_mm / REFERENCE_STROKE_MM
    return displacement_effect * stroke_effect * cfg.aspiration_factor * throttle * 50.0 + 10.0


class EngineSimulation:
    def __init__(self, cfg=None):
        self.cfg = cfg or EngineConfig()
        self.rpm = 0.0
        self.throttle = 0.0
        self.running = False
        self.cycle_position = 0.0
        self.piston_positions = np.zeros(self.cfg.cylinders)
        self.torque = 0.0
        self.horsepower = 0.0

    def start(self):
        if self.running: return
        self.running = True
        self.rpm = float(self.cfg.ecu.idle_rpm)
        log.info("Engine started at %.0f rpm", self.rpm)

    def stop(self):
        if not self.running: return
        self.running = False
        self.rpm = 0.0
        self.throttle = 0.0
        log.info("Engine stopped")

    def toggle(self):
        if self.running: self.stop()
        else: self.start()

    def set_throttle(self, delta):
        self.throttle = clamp(self.throttle + delta, 0.0, 1.0)

    def update(self, dt):
        if not self.running: return
        dt = max(0.0, dt)
        ecu = self.cfg.ecu

        # First-order lag toward a throttle-proportional target
        self.rpm += (self.throttle * 1000.0 - self.rpm * 0.05) * dt
        self.rpm = clamp(self.rpm, ecu.idle_rpm, ecu.rev_limit_rpm)

        self.cycle_position = (self.cycle_position + (self.rpm / 60.0) * dt) % 1.0
        # Float modulo can land on 1.0 for tiny negative remainders
        if self.cycle_position >= 1.0: self.cycle_position = 0.0

        self.piston_positions = piston_positions(self.cycle_position, self.cfg.cylinders)

        self.torque = torque_estimate(self.cfg, self.throttle)
        self.horsepower = (self.torque * self.rpm) / TORQUE_TO_HP

    def get_state(self):
        return {
            "rpm": self.rpm, "throttle": self.throttle, "running": self.running,
            "cycle_position": self.cycle_position,
            "piston_positions": self.piston_positions.tolist(),
            "torque": self.torque, "horsepower": self.horsepower,
        }
