import os
import sys
import logging
from dataclasses import dataclass, field

from engine import EngineConfig

WIDTH, HEIGHT = 1280, 720
FPS = 60
LOG_CSV = os.environ.get("ENGINE_LOG_CSV", "engine_timeseries.csv")
SOUND_FILE = os.environ.get("ENGINE_SOUND_FILE", "")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    width: int = WIDTH
    height: int = HEIGHT
    fps: int = FPS
    log_csv: str = LOG_CSV
    sound_file: str = SOUND_FILE
    headless: bool = False
    duration: float = 10.0
    throttle: float = 1.0
    engine: EngineConfig = field(default_factory=EngineConfig)


def setup_logging(verbose=False):
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root
