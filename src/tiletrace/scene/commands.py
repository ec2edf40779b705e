"""Camera movement commands and their key bindings.

Input collaborators hand the scene an abstract identifier; this module maps
it to one of a fixed set of camera movements. Identifiers may be a Command
member, a command name ("move_left"), or a key identifier bound below.
"""

from __future__ import annotations

from enum import Enum


class Command(str, Enum):
    """Camera movements the scene understands."""

    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_FORWARD = "move_forward"
    MOVE_BACK = "move_back"
    MOVE_EYE_FORWARD = "move_eye_forward"
    MOVE_EYE_BACK = "move_eye_back"


# Key identifiers follow browser-style key names; lower and upper case
# letters are distinct keys.
KEY_BINDINGS: dict[str, Command] = {
    "w": Command.MOVE_FORWARD,
    "W": Command.MOVE_EYE_FORWARD,
    "a": Command.MOVE_LEFT,
    "ArrowLeft": Command.MOVE_LEFT,
    "s": Command.MOVE_BACK,
    "S": Command.MOVE_EYE_BACK,
    "d": Command.MOVE_RIGHT,
    "ArrowRight": Command.MOVE_RIGHT,
    "ArrowUp": Command.MOVE_UP,
    "ArrowDown": Command.MOVE_DOWN,
}


def resolve_command(identifier: object) -> Command | None:
    """Resolve an input identifier to a Command.

    Args:
        identifier: A Command, a command name, or a bound key identifier.

    Returns:
        The matching Command, or None if the identifier is not recognized.
    """
    if isinstance(identifier, Command):
        return identifier
    if not isinstance(identifier, str):
        return None
    if identifier in KEY_BINDINGS:
        return KEY_BINDINGS[identifier]
    try:
        return Command(identifier)
    except ValueError:
        return None
