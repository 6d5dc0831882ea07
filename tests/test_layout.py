from layout import button_at, compute_layout
from screens import AppContext


def test_menu_buttons_centered():
    lay = compute_layout(800, 600)
    assert [b.label for b in lay.menu_buttons] == ["Play", "Credits", "Quit"]
    assert [tuple(b.rect) for b in lay.menu_buttons] == [
        (350, 300, 100, 40), (350, 360, 100, 40), (350, 420, 100, 40),
    ]


def test_credits_lines():
    lay = compute_layout(800, 600)
    assert [l.center[1] for l in lay.credits_lines] == [100, 160, 200, 240, 280, 320, 360]
    assert all(l.center[0] == 400 for l in lay.credits_lines)
    assert lay.credits_lines[4].text == "Loay"


def test_button_at():
    lay = compute_layout(800, 600)
    assert button_at(lay.menu_buttons, (400, 320)).action == "play"
    assert button_at(lay.menu_buttons, (400, 440)).action == "quit"
    assert button_at(lay.menu_buttons, (10, 10)) is None
    assert lay.back_button.hit((60, 40))
    assert not lay.back_button.hit((200, 40))


def test_layout_is_pure():
    assert compute_layout(1024, 768) == compute_layout(1024, 768)


def test_resize_recomputes_layout():
    ctx = AppContext(width=800, height=600)
    ctx.resize(1600, 900)
    assert ctx.layout.center == (800, 450)
    assert ctx.layout.menu_buttons[0].rect.x == 750
