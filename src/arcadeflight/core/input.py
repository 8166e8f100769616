"""Input handling: held-control aggregation and keyboard mapping.

Input events arrive asynchronously (pygame event pump, remote sources, tests)
while the flight model reads controls once per fixed tick. Press and release
events are queued by the InputAggregator and drained into an immutable
snapshot at the tick boundary, so a tick never observes a half-applied
change and a released control can never stay held.

Typical usage example:
    from arcadeflight.core.input import FlightControl, InputAggregator, InputManager

    aggregator = InputAggregator()
    manager = InputManager(aggregator, InputConfig.from_key_names(bindings))

    # In game loop
    actions = manager.process_events(pygame.event.get())
    controls = aggregator.snapshot()
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pygame  # pylint: disable=no-member

from arcadeflight.core.logging_system import get_logger

logger = get_logger(__name__)


class FlightControl(Enum):
    """Logical flight controls that stay active while held."""

    PITCH_UP = "pitch_up"
    PITCH_DOWN = "pitch_down"
    ROLL_LEFT = "roll_left"
    ROLL_RIGHT = "roll_right"
    THROTTLE_UP = "throttle_up"
    THROTTLE_DOWN = "throttle_down"
    FLAPS_EXTEND = "flaps_extend"
    FLAPS_RETRACT = "flaps_retract"

    @classmethod
    def parse(cls, control: Any) -> "FlightControl | None":
        """Resolve a control identifier.

        Args:
            control: A FlightControl or its string value.

        Returns:
            The control, or None if the identifier is unknown.
        """
        if isinstance(control, cls):
            return control
        if isinstance(control, str):
            try:
                return cls(control.lower())
            except ValueError:
                return None
        return None


class UserAction(Enum):
    """One-shot user actions, applied between ticks."""

    TOGGLE_PAUSE = "toggle_pause"
    CYCLE_CAMERA = "cycle_camera"
    TOGGLE_GEAR = "toggle_gear"
    QUIT = "quit"


ControlSnapshot = frozenset[FlightControl]

EMPTY_SNAPSHOT: ControlSnapshot = frozenset()


@dataclass(frozen=True)
class InputEvent:
    """Press or release of a logical control.

    Attributes:
        control: Control that changed.
        pressed: True for press, False for release.
    """

    control: FlightControl
    pressed: bool


class InputAggregator:
    """Tracks currently held flight controls.

    ``activate`` and ``deactivate`` may be called from any thread; they only
    append to an event queue. ``snapshot`` drains the queue in arrival order
    and returns the resulting held set as a frozenset.

    Examples:
        >>> aggregator = InputAggregator()
        >>> aggregator.activate(FlightControl.THROTTLE_UP)
        >>> FlightControl.THROTTLE_UP in aggregator.snapshot()
        True
    """

    def __init__(self) -> None:
        """Initialize with nothing held."""
        self._events: deque[InputEvent] = deque()
        self._lock = threading.Lock()
        self._held: set[FlightControl] = set()
        self._last_snapshot: ControlSnapshot = EMPTY_SNAPSHOT

    def activate(self, control: Any) -> None:
        """Mark a control as held.

        Args:
            control: FlightControl or its string identifier. Unknown
                identifiers are ignored.
        """
        self._enqueue(control, pressed=True)

    def deactivate(self, control: Any) -> None:
        """Mark a control as released.

        Args:
            control: FlightControl or its string identifier. Unknown
                identifiers are ignored.
        """
        self._enqueue(control, pressed=False)

    def release_all(self) -> None:
        """Release every control, including presses still queued."""
        with self._lock:
            self._events.clear()
            self._held.clear()
            self._last_snapshot = EMPTY_SNAPSHOT
        logger.debug("All controls released")

    def snapshot(self) -> ControlSnapshot:
        """Apply queued events and return the held set.

        Returns:
            Immutable set of held controls.
        """
        with self._lock:
            while self._events:
                event = self._events.popleft()
                if event.pressed:
                    self._held.add(event.control)
                else:
                    self._held.discard(event.control)
            self._last_snapshot = frozenset(self._held)
            return self._last_snapshot

    def is_active(self, control: FlightControl) -> bool:
        """Check a control against the most recent snapshot."""
        return control in self._last_snapshot

    @property
    def pending_events(self) -> int:
        """Number of events queued since the last snapshot."""
        with self._lock:
            return len(self._events)

    def _enqueue(self, control: Any, pressed: bool) -> None:
        parsed = FlightControl.parse(control)
        if parsed is None:
            logger.debug("Ignoring unknown control: %r", control)
            return
        with self._lock:
            self._events.append(InputEvent(parsed, pressed))


Binding = FlightControl | UserAction


@dataclass
class InputConfig:
    """Keyboard bindings resolved to pygame key codes.

    Attributes:
        keyboard_bindings: Map of pygame key constants to a control or action.
    """

    keyboard_bindings: dict[int, Binding] = field(default_factory=dict)

    @classmethod
    def from_key_names(cls, bindings: dict[str, list[str]]) -> "InputConfig":
        """Build key code bindings from action names and key names.

        Args:
            bindings: Map of control/action value (e.g. "pitch_up") to pygame
                key names (e.g. ["w", "up"]).

        Returns:
            Resolved configuration. Unknown actions and key names are logged
            and skipped.
        """
        resolved: dict[int, Binding] = {}
        for action_name, key_names in bindings.items():
            target = _parse_binding(action_name)
            if target is None:
                logger.warning("Unknown action in keybindings: %s", action_name)
                continue
            for key_name in key_names:
                try:
                    key = pygame.key.key_code(key_name)
                except ValueError:
                    logger.warning("Unknown key name for %s: %s", action_name, key_name)
                    continue
                if key in resolved and resolved[key] != target:
                    logger.warning(
                        "Key %s rebound from %s to %s",
                        key_name,
                        resolved[key].value,
                        target.value,
                    )
                resolved[key] = target
        return cls(keyboard_bindings=resolved)


def _parse_binding(name: str) -> Binding | None:
    control = FlightControl.parse(name)
    if control is not None:
        return control
    try:
        return UserAction(name.lower())
    except ValueError:
        return None


class InputManager:
    """Translates pygame keyboard events into controls and user actions.

    Held keys bound to a FlightControl are forwarded to the aggregator. A
    control is released only when no other key bound to it is still down
    (W and Up both map to pitch-up). Keys bound to a UserAction fire once
    per press; auto-repeat is ignored.

    Examples:
        >>> manager = InputManager(aggregator, config)
        >>> actions = manager.process_events(pygame.event.get())
        >>> if UserAction.QUIT in actions:
        ...     running = False
    """

    def __init__(self, aggregator: InputAggregator, config: InputConfig | None = None) -> None:
        """Initialize input manager.

        Args:
            aggregator: Aggregator that receives control presses/releases.
            config: Key bindings (empty if None).
        """
        self.aggregator = aggregator
        self.config = config if config is not None else InputConfig()
        self._keys_pressed: set[int] = set()

    def process_events(self, events: list[pygame.event.Event]) -> list[UserAction]:
        """Process pygame events.

        Args:
            events: Events from the pygame event queue.

        Returns:
            User actions triggered by these events, in order.
        """
        actions: list[UserAction] = []
        for event in events:
            if event.type == pygame.KEYDOWN:
                action = self._handle_key_down(event.key)
                if action is not None:
                    actions.append(action)
            elif event.type == pygame.KEYUP:
                self._handle_key_up(event.key)
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.release_all()
            elif event.type == pygame.QUIT:
                actions.append(UserAction.QUIT)
        return actions

    def release_all(self) -> None:
        """Forget every pressed key and release all controls."""
        self._keys_pressed.clear()
        self.aggregator.release_all()

    def _handle_key_down(self, key: int) -> UserAction | None:
        is_repeat = key in self._keys_pressed
        self._keys_pressed.add(key)

        binding = self.config.keyboard_bindings.get(key)
        if binding is None:
            logger.debug("KEY: %s (code=%d) -> NOT BOUND", pygame.key.name(key), key)
            return None
        if isinstance(binding, FlightControl):
            self.aggregator.activate(binding)
            return None
        if is_repeat:
            return None
        logger.debug("KEY: %s -> %s", pygame.key.name(key), binding.value)
        return binding

    def _handle_key_up(self, key: int) -> None:
        if key not in self._keys_pressed:
            return
        self._keys_pressed.discard(key)

        binding = self.config.keyboard_bindings.get(key)
        if not isinstance(binding, FlightControl):
            return
        still_held = any(
            self.config.keyboard_bindings.get(other) == binding for other in self._keys_pressed
        )
        if not still_held:
            self.aggregator.deactivate(binding)
