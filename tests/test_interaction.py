import pytest

from src.editor.editor_state import InteractionMode, ResizeHandle
from src.editor.frame_store import Frame
from src.editor.interaction import PointerEvent, resize_from_snapshot
from src.editor.session import EditorSession


def _session():
    # 200x100 image in a 400x300 viewport: image (0, 0) is at screen (100, 100).
    session = EditorSession.for_asset((200, 100))
    session.set_viewport(400, 300)
    return session


def _drag(session, start, *moves):
    session.handle_pointer(PointerEvent(*start, "down"))
    for point in moves:
        session.handle_pointer(PointerEvent(*point, "move"))
    end = moves[-1] if moves else start
    return session.handle_pointer(PointerEvent(*end, "up"))


def _session_with_frame():
    session = _session()
    _drag(session, (110, 110), (150, 160))
    return session


def test_drawing_commits_frame_with_default_anchor():
    session = _session()
    assert session.handle_pointer(PointerEvent(110, 110, "down"))
    assert session.interaction.mode == InteractionMode.DRAWING
    session.handle_pointer(PointerEvent(140, 150, "move"))
    assert session.render_view().pending_rect == (10, 10, 30, 40)

    assert session.handle_pointer(PointerEvent(150, 160, "up"))
    frame = session.current_frames[0]
    assert (frame.x, frame.y, frame.w, frame.h) == (10, 10, 40, 50)
    assert (frame.anchor.x, frame.anchor.y) == (20, 50)
    assert session.interaction.selected_frame_index == 0
    assert session.interaction.mode == InteractionMode.IDLE
    assert session.interaction.pending_rect is None
    assert session.status_message == "Created frame 0 in 'idle'."


def test_drawing_backwards_normalises_rectangle():
    session = _session()
    _drag(session, (150, 160), (110, 110))
    frame = session.current_frames[0]
    assert (frame.x, frame.y, frame.w, frame.h) == (10, 10, 40, 50)


def test_ten_pixel_drag_creates_ten_pixel_frame():
    session = _session()
    _drag(session, (110, 110), (120, 120))
    assert len(session.current_frames) == 1
    frame = session.current_frames[0]
    assert (frame.w, frame.h) == (10, 10)
    assert (frame.anchor.x, frame.anchor.y) == (5, 10)


def test_up_position_is_applied_before_commit():
    session = _session()
    session.handle_pointer(PointerEvent(110, 110, "down"))
    session.handle_pointer(PointerEvent(150, 160, "up"))
    assert len(session.current_frames) == 1


@pytest.mark.parametrize("end", [(112, 160), (150, 112), (110, 110)])
def test_tiny_rectangles_are_discarded(end):
    session = _session()
    _drag(session, (110, 110), end)
    assert session.current_frames == []
    assert session.interaction.selected_frame_index == -1
    assert session.render_view().pending_rect is None


def test_drawing_is_ignored_without_image():
    session = EditorSession()
    assert not session.handle_pointer(PointerEvent(10, 10, "down"))
    assert session.interaction.mode == InteractionMode.IDLE
    session.handle_pointer(PointerEvent(100, 100, "up"))
    assert session.current_frames == []


def test_drag_frame_uses_delta_from_gesture_start():
    session = _session_with_frame()
    session.handle_pointer(PointerEvent(130, 130, "down"))
    assert session.interaction.mode == InteractionMode.DRAGGING_FRAME
    session.handle_pointer(PointerEvent(150, 140, "move"))
    session.handle_pointer(PointerEvent(140, 130, "move"))
    session.handle_pointer(PointerEvent(140, 130, "up"))

    frame = session.current_frames[0]
    assert (frame.x, frame.y, frame.w, frame.h) == (20, 10, 40, 50)
    assert (frame.anchor.x, frame.anchor.y) == (20, 50)
    assert session.interaction.selected_frame_index == 0


def test_drag_frame_scales_screen_delta_by_zoom():
    session = _session_with_frame()
    session.camera.zoom = 2.0
    # Origin moves to (0, 50); image (30, 30) is now at screen (60, 110).
    _drag(session, (60, 110), (80, 120))
    frame = session.current_frames[0]
    assert (frame.x, frame.y) == (20, 15)


def test_anchor_drag_moves_only_the_pivot():
    session = _session_with_frame()
    # Default anchor (20, 50) of the frame at (10, 10) is screen (130, 160).
    session.handle_pointer(PointerEvent(130, 160, "down"))
    assert session.interaction.mode == InteractionMode.DRAGGING_ANCHOR
    session.handle_pointer(PointerEvent(135, 150, "move"))
    session.handle_pointer(PointerEvent(135, 150, "up"))

    frame = session.current_frames[0]
    assert (frame.anchor.x, frame.anchor.y) == (25, 40)
    assert (frame.x, frame.y, frame.w, frame.h) == (10, 10, 40, 50)


def test_resize_from_north_west_keeps_opposite_edges():
    session = _session_with_frame()
    session.handle_pointer(PointerEvent(110, 110, "down"))
    assert session.interaction.active_handle == ResizeHandle.NW
    session.handle_pointer(PointerEvent(120, 115, "move"))
    frame = session.current_frames[0]
    assert (frame.x, frame.y, frame.w, frame.h) == (20, 15, 30, 45)

    session.handle_pointer(PointerEvent(200, 200, "move"))
    assert (frame.x, frame.y, frame.w, frame.h) == (49, 59, 1, 1)
    assert (frame.x + frame.w, frame.y + frame.h) == (50, 60)
    session.handle_pointer(PointerEvent(200, 200, "up"))
    assert (frame.anchor.x, frame.anchor.y) == (20, 50)


def test_resize_from_south_east_moves_only_far_edges():
    session = _session_with_frame()
    session.handle_pointer(PointerEvent(150, 160, "down"))
    assert session.interaction.mode == InteractionMode.RESIZING_FRAME
    session.handle_pointer(PointerEvent(130, 150, "move"))
    frame = session.current_frames[0]
    assert (frame.x, frame.y, frame.w, frame.h) == (10, 10, 20, 40)


@pytest.mark.parametrize(
    "handle, dx, dy, expected",
    [
        (ResizeHandle.NE, 5, -5, (10, 5, 25, 25)),
        (ResizeHandle.SW, -5, 5, (5, 10, 25, 25)),
        (ResizeHandle.SE, -100, -100, (10, 10, 1, 1)),
        (ResizeHandle.NW, -10, -10, (0, 0, 30, 30)),
    ],
)
def test_resize_from_snapshot(handle, dx, dy, expected):
    snapshot = Frame(x=10, y=10, w=20, h=20).snapshot()
    assert resize_from_snapshot(snapshot, handle, dx, dy) == expected


def test_click_on_empty_space_deselects():
    session = _session_with_frame()
    session.handle_pointer(PointerEvent(280, 180, "down"))
    assert session.interaction.selected_frame_index == -1
    assert session.interaction.mode == InteractionMode.DRAWING
    session.handle_pointer(PointerEvent(280, 180, "up"))
    assert len(session.current_frames) == 1


def test_topmost_frame_is_selected_on_overlap():
    session = _session()
    _drag(session, (110, 110), (150, 150))
    _drag(session, (200, 180), (130, 130))
    session.select_frame(-1)
    session.handle_pointer(PointerEvent(140, 140, "down"))
    assert session.interaction.selected_frame_index == 1


def test_pan_tool_pans_by_raw_screen_delta():
    session = _session_with_frame()
    session.set_tool("pan")
    session.camera.zoom = 3.0
    session.handle_pointer(PointerEvent(100, 100, "down"))
    session.handle_pointer(PointerEvent(110, 105, "move"))
    session.handle_pointer(PointerEvent(120, 105, "move"))
    session.handle_pointer(PointerEvent(120, 105, "up"))
    assert (session.camera.pan_x, session.camera.pan_y) == (20, 5)
    assert session.current_frames[0].x == 10


def test_wheel_zooms_in_fixed_steps():
    session = _session()
    assert session.handle_pointer(PointerEvent(0, 0, "move", wheel_delta=1))
    assert session.camera.zoom == pytest.approx(1.1)
    session.handle_pointer(PointerEvent(0, 0, "move", wheel_delta=-3))
    assert session.camera.zoom == pytest.approx(1.0)


def test_delete_intent_removes_selection_only_when_idle():
    session = _session_with_frame()
    session.handle_pointer(PointerEvent(130, 130, "down"))
    assert not session.handle_intent("delete_selected")
    session.handle_pointer(PointerEvent(130, 130, "up"))

    assert session.handle_intent("delete_selected")
    assert session.current_frames == []
    assert session.interaction.selected_frame_index == -1
    assert not session.handle_intent("delete_selected")


def test_hover_reports_what_a_press_would_grab():
    session = _session_with_frame()
    assert session.hover((130, 160)) == "anchor"
    assert session.hover((150, 110)) == "ne"
    assert session.hover((130, 130)) == "frame"
    assert session.hover((290, 190)) is None
