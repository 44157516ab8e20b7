# kennel/core/transitions.py
from __future__ import annotations

from enum import Enum


class Transition(str, Enum):
    JOIN = "join"
    LEAVE = "leave"
    MOVE = "move"
    NOOP = "noop"


def classify(before_channel_id: int | None, after_channel_id: int | None) -> Transition:
    """
    Classify one voice-state change from the (before, after) channel pair.

      None -> X     JOIN
      X    -> None  LEAVE
      X    -> Y     MOVE
      X    -> X     NOOP (also None -> None)
    """
    if before_channel_id == after_channel_id:
        return Transition.NOOP
    if before_channel_id is None:
        return Transition.JOIN
    if after_channel_id is None:
        return Transition.LEAVE
    return Transition.MOVE
