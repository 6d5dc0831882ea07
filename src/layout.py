"""Hit-testable regions for each screen, derived from the window size.

Everything here is a pure function of ``(width, height)``; the app recomputes
it on resize instead of mutating shared button lists.
"""
import pygame
from dataclasses import dataclass

BUTTON_W, BUTTON_H = 100, 40

CREDITS_TEXT = (
    ("Credits", 32),
    ("Design & Development:", 24),
    ("ChatGPT", 20),
    ("Concept:", 24),
    ("Loay", 20),
    ("Sound:", 24),
    ("Adam", 20),
)


@dataclass(frozen=True)
class Button:
    label: str
    rect: pygame.Rect
    action: str

    def hit(self, pos):
        return self.rect.collidepoint(pos)


@dataclass(frozen=True)
class TextLine:
    text: str
    size: int
    center: tuple


@dataclass(frozen=True)
class ScreenLayout:
    width: int
    height: int
    menu_buttons: tuple
    credits_lines: tuple
    back_button: Button
    stop_button: Button

    @property
    def center(self):
        return (self.width // 2, self.height // 2)


def compute_layout(width, height):
    cx = width / 2
    menu = tuple(
        Button(label, pygame.Rect(int(cx - BUTTON_W / 2), int(height / 2 + i * 60), BUTTON_W, BUTTON_H), action)
        for i, (label, action) in enumerate((("Play", "play"), ("Credits", "credits"), ("Quit", "quit")))
    )
    lines = tuple(
        TextLine(text, size, (int(cx), 100 if i == 0 else 120 + i * 40)) for i, (text, size) in enumerate(CREDITS_TEXT)
    )
    # Back label is drawn from (60, 40); its hit box is 100x30 centered there
    back = Button("← Back", pygame.Rect(10, 25, 100, 30), "back")
    stop = Button("Stop", pygame.Rect(20, 20, 80, 30), "stop")
    return ScreenLayout(width, height, menu, lines, back, stop)


def button_at(buttons, pos):
    for b in buttons:
        if b.hit(pos): return b
    return None
