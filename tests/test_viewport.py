#!filepath: tests/test_viewport.py
from __future__ import annotations

from azstore_app.tui.log_view import LogView
from azstore_app.tui.viewport import ViewportController


def _controller(n: int, height: int) -> tuple[list[str], ViewportController]:
    lines = [str(i) for i in range(n)]
    return lines, ViewportController(lambda: len(lines), visible_height=height)


def test_follow_tail_tracks_growth() -> None:
    view = LogView(capacity=100, visible_height=4)
    for i in range(10):
        view.append(str(i))
        vp = view.viewport
        assert vp.follow_tail
        assert vp.origin == max(0, len(view.buffer) - 4)


def test_scroll_up_leaves_follow_and_sticks() -> None:
    view = LogView(capacity=100, visible_height=3)
    for i in range(10):
        view.append(str(i))
    assert view.viewport.origin == 7

    view.viewport.scroll_by(-2)
    assert view.viewport.origin == 5
    assert not view.viewport.follow_tail

    for i in range(5):
        view.append(f"new {i}")
    assert view.viewport.origin == 5
    assert view.window().lines == ("5", "6", "7")


def test_scroll_up_clamps_at_zero() -> None:
    _, vp = _controller(4, 3)
    vp.scroll_by(-10)
    assert vp.origin == 0
    assert not vp.follow_tail


def test_scrolling_back_to_bottom_resumes_follow() -> None:
    lines, vp = _controller(10, 3)
    vp.scroll_by(-3)
    assert not vp.follow_tail
    vp.scroll_by(2)
    assert not vp.follow_tail
    vp.scroll_by(5)
    assert vp.origin == 7
    assert vp.follow_tail
    lines.append("10")
    vp.on_append()
    assert vp.origin == 8


def test_page_step_is_visible_height() -> None:
    _, vp = _controller(50, 10)
    vp.page_up()
    assert vp.origin == 30
    vp.page_up()
    assert vp.origin == 20
    vp.page_down()
    assert vp.origin == 30
    assert not vp.follow_tail
    vp.page_down()
    assert vp.origin == 40
    assert vp.follow_tail


def test_follow_jumps_to_bottom() -> None:
    _, vp = _controller(20, 5)
    vp.scroll_by(-8)
    vp.follow()
    assert vp.origin == 15
    assert vp.follow_tail


def test_unfollowed_origin_clamped_when_content_shrinks() -> None:
    lines, vp = _controller(20, 5)
    vp.scroll_by(-1)
    assert vp.origin == 14
    del lines[10:]
    vp.on_append()
    assert vp.origin == 5


def test_resize_recomputes_bottom_when_following() -> None:
    _, vp = _controller(20, 5)
    vp.resize(8)
    assert vp.origin == 12
    vp.scroll_by(-12)
    vp.resize(30)
    assert vp.origin == 0
    assert vp.visible_height == 30


def test_resize_never_goes_below_one_row() -> None:
    _, vp = _controller(3, 2)
    vp.resize(0)
    assert vp.visible_height == 1


def test_ensure_visible_scrolls_minimally() -> None:
    count = 10
    vp = ViewportController(lambda: count, visible_height=3, follow_tail=False)
    assert vp.origin == 0
    vp.ensure_visible(4)
    assert vp.origin == 2
    vp.ensure_visible(3)
    assert vp.origin == 2
    vp.ensure_visible(0)
    assert vp.origin == 0


def test_capacity_five_example() -> None:
    view = LogView(capacity=5, visible_height=3)
    for x in "abcdef":
        view.append(x)
    assert view.buffer.snapshot() == ("b", "c", "d", "e", "f")
    assert view.viewport.origin == 2
    assert view.window().lines == ("d", "e", "f")

    view.viewport.scroll_by(-1)
    assert view.viewport.origin == 1
    assert not view.viewport.follow_tail
    assert view.window().lines == ("c", "d", "e")

    view.append("g")
    assert view.buffer.snapshot() == ("c", "d", "e", "f", "g")
    assert view.viewport.origin == 1
    assert view.window().lines == ("d", "e", "f")
    assert view.window().hidden_below == 1


def test_reset_clears_buffer_and_follows_again() -> None:
    view = LogView(capacity=5, visible_height=2)
    for x in "abcd":
        view.append(x)
    view.viewport.scroll_by(-1)
    view.reset()
    assert view.buffer.length() == 0
    assert view.viewport.origin == 0
    assert view.viewport.follow_tail
