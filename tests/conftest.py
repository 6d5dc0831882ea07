"""Run pygame without a real display or sound card."""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest


@pytest.fixture(scope="session")
def pygame_session():
    pygame.init()
    yield
    pygame.quit()
