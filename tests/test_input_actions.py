import json
from unittest.mock import MagicMock, patch

import pygame
import pytest

from src.core.input_actions import (
    InputActionMap,
    dispatch_event,
    key_from_token,
    load_action_map,
    pointer_event_from_pygame,
)
from src.editor.interaction import PointerEvent


def test_default_bindings_support_multiple_equivalent_keys():
    actions = InputActionMap()
    assert pygame.K_EQUALS in actions.keys_for("zoom_in")
    assert pygame.K_KP_PLUS in actions.keys_for("zoom_in")
    assert actions.intents_for_key(pygame.K_DELETE) == ["delete_selected"]
    assert actions.intents_for_key(pygame.K_BACKSPACE) == ["delete_selected"]
    assert actions.conflicts() == []


def test_keydown_resolves_to_intents():
    actions = InputActionMap()
    event = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_TAB, unicode="\t")
    assert actions.intents_for_event(event) == ["toggle_tool"]

    key_up = pygame.event.Event(pygame.KEYUP, key=pygame.K_TAB)
    assert actions.intents_for_event(key_up) == []


def test_key_tokens():
    assert key_from_token("K_TAB") == pygame.K_TAB
    assert key_from_token(" t ") == pygame.K_t
    assert key_from_token(pygame.K_a) == pygame.K_a
    assert key_from_token(True) is None
    assert key_from_token("") is None
    assert key_from_token(None) is None


def test_override_file_supports_key_name_tokens(tmp_path):
    binding_path = tmp_path / "input_bindings.json"
    binding_path.write_text(
        json.dumps({"zoom_in": ["i", "K_o", "i"], "fly": ["f"], "zoom_out": "k"}),
        encoding="utf-8",
    )

    actions = load_action_map(str(binding_path))
    assert actions.keys_for("zoom_in") == (pygame.K_i, pygame.K_o)
    assert actions.keys_for("fly") == ()
    assert pygame.K_MINUS in actions.keys_for("zoom_out")


@patch("builtins.print")
def test_missing_or_broken_override_file_keeps_defaults(mock_print, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_action_map(str(broken)).bindings == InputActionMap().bindings
    assert "could not read key bindings" in mock_print.call_args[0][0]
    assert load_action_map(str(tmp_path / "missing.json")).bindings == InputActionMap().bindings


@patch("builtins.print")
def test_conflicting_bindings_are_reported(mock_print, tmp_path):
    binding_path = tmp_path / "input_bindings.json"
    binding_path.write_text(json.dumps({"zoom_out": ["="]}), encoding="utf-8")

    actions = load_action_map(str(binding_path))
    assert actions.conflicts() == [(pygame.K_EQUALS, ("zoom_in", "zoom_out"))]
    assert actions.intents_for_key(pygame.K_EQUALS) == ["zoom_in", "zoom_out"]
    mock_print.assert_called_once()


def test_rebind_rejects_unknown_intent():
    actions = InputActionMap()
    actions.rebind("toggle_tool", ["space"])
    assert actions.keys_for("toggle_tool") == (pygame.K_SPACE,)
    with pytest.raises(ValueError):
        actions.rebind("jump", ["j"])


def test_mouse_events_become_pointer_events():
    down = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 20))
    assert pointer_event_from_pygame(down) == PointerEvent(10.0, 20.0, "down")

    right_click = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(10, 20))
    assert pointer_event_from_pygame(right_click) is None

    motion = pygame.event.Event(pygame.MOUSEMOTION, pos=(5, 6), rel=(1, 1), buttons=(1, 0, 0))
    assert pointer_event_from_pygame(motion) == PointerEvent(5.0, 6.0, "move")

    up = pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(7, 8))
    assert pointer_event_from_pygame(up).kind == "up"

    wheel = pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=-1, pos=(30, 40))
    assert pointer_event_from_pygame(wheel) == PointerEvent(30.0, 40.0, "move", wheel_delta=-1.0)

    assert pointer_event_from_pygame(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a)) is None


def test_dispatch_routes_pointer_and_key_events():
    session = MagicMock()
    session.handle_pointer.return_value = True
    session.handle_intent.return_value = False
    actions = InputActionMap()

    assert dispatch_event(session, pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(1, 2)), actions)
    session.handle_pointer.assert_called_once_with(PointerEvent(1.0, 2.0, "down"))

    assert not dispatch_event(session, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_MINUS), actions)
    session.handle_intent.assert_called_once_with("zoom_out")
