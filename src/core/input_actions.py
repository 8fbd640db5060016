"""pygame input boundary: keyboard intents and pointer normalisation."""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Tuple

import pygame

from src.core import config
from src.editor.interaction import PointerEvent

if TYPE_CHECKING:
    from src.editor.session import EditorSession


IntentBindings = Dict[str, Tuple[int, ...]]

INTENTS = ("zoom_in", "zoom_out", "delete_selected", "toggle_tool")

DEFAULT_INTENT_BINDINGS: IntentBindings = {
    "zoom_in": (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS),
    "zoom_out": (pygame.K_MINUS, pygame.K_KP_MINUS),
    "delete_selected": (pygame.K_DELETE, pygame.K_BACKSPACE),
    "toggle_tool": (pygame.K_TAB, pygame.K_t),
}

_PRIMARY_BUTTON = 1


def key_from_token(token: object) -> Optional[int]:
    """Resolve one binding entry: a key code, or a name like ``"tab"`` / ``"K_TAB"``."""
    if isinstance(token, bool):
        return None
    if isinstance(token, int):
        return token
    name = token.strip() if isinstance(token, str) else ""
    if name.startswith("K_"):
        name = name[2:]
    if not name:
        return None
    try:
        return pygame.key.key_code(name.lower())
    except (ValueError, TypeError):
        return None


def _key_codes(tokens: Iterable[object]) -> Tuple[int, ...]:
    codes = (key_from_token(token) for token in tokens)
    # First occurrence wins; order is kept.
    return tuple(dict.fromkeys(code for code in codes if code is not None))


class InputActionMap:
    """Keyboard bindings for editor intents.

    Only names in ``INTENTS`` can be bound. A key bound to several intents
    fires all of them; ``conflicts()`` lists such keys.
    """

    def __init__(self, overrides: Optional[Mapping[str, Iterable[object]]] = None) -> None:
        self._bindings: IntentBindings = {
            intent: _key_codes(keys) for intent, keys in DEFAULT_INTENT_BINDINGS.items()
        }
        for intent, keys in (overrides or {}).items():
            if intent in self._bindings:
                self._bindings[intent] = _key_codes(keys)

    @property
    def bindings(self) -> IntentBindings:
        return dict(self._bindings)

    def keys_for(self, intent: str) -> Tuple[int, ...]:
        return self._bindings.get(intent, ())

    def intents_for_key(self, key_code: int) -> List[str]:
        return [intent for intent in INTENTS if key_code in self._bindings[intent]]

    def intents_for_event(self, event: pygame.event.Event) -> List[str]:
        if event.type != pygame.KEYDOWN:
            return []
        return self.intents_for_key(event.key)

    def rebind(self, intent: str, keys: Iterable[object]) -> None:
        if intent not in self._bindings:
            raise ValueError(f"Unknown intent '{intent}'.")
        self._bindings[intent] = _key_codes(keys)

    def conflicts(self) -> List[Tuple[int, Tuple[str, ...]]]:
        owners: Dict[int, List[str]] = {}
        for intent in INTENTS:
            for key_code in self._bindings[intent]:
                owners.setdefault(key_code, []).append(intent)
        return [(key_code, tuple(intents)) for key_code, intents in owners.items() if len(intents) > 1]


def pointer_event_from_pygame(event: pygame.event.Event) -> Optional[PointerEvent]:
    """Translate a pygame mouse event into a normalised pointer event.

    Only the primary button drives gestures; other buttons and non-mouse
    events return None. Wheel events become a ``move`` carrying a wheel delta
    at the current cursor position.
    """
    if event.type == pygame.MOUSEBUTTONDOWN and event.button == _PRIMARY_BUTTON:
        return PointerEvent(float(event.pos[0]), float(event.pos[1]), "down")
    if event.type == pygame.MOUSEBUTTONUP and event.button == _PRIMARY_BUTTON:
        return PointerEvent(float(event.pos[0]), float(event.pos[1]), "up")
    if event.type == pygame.MOUSEMOTION:
        return PointerEvent(float(event.pos[0]), float(event.pos[1]), "move")
    if event.type == pygame.MOUSEWHEEL:
        x, y = getattr(event, "pos", None) or pygame.mouse.get_pos()
        return PointerEvent(float(x), float(y), "move", wheel_delta=float(event.y))
    return None


def dispatch_event(session: "EditorSession", event: pygame.event.Event, action_map: InputActionMap) -> bool:
    """Feed one pygame event to an editor session. Returns True if it changed."""
    pointer = pointer_event_from_pygame(event)
    if pointer is not None:
        return session.handle_pointer(pointer)
    changed = False
    for intent in action_map.intents_for_event(event):
        changed = session.handle_intent(intent) or changed
    return changed


def _read_overrides(path: str) -> Dict[str, list]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Warning: could not read key bindings {path}: {e}")
        return {}
    if not isinstance(data, dict):
        return {}
    return {intent: keys for intent, keys in data.items() if intent in INTENTS and isinstance(keys, list)}


def load_action_map(path: Optional[str] = None) -> InputActionMap:
    binding_path = path or os.path.join(config.DATA_DIR, "input_bindings.json")
    action_map = InputActionMap(_read_overrides(binding_path))
    for key_code, intents in action_map.conflicts():
        print(f"Warning: key code {key_code} is bound to several intents: {', '.join(intents)}.")
    return action_map
