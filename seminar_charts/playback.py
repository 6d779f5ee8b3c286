"""Frame playback for the animated order-book charts.

The book charts step through snapshots on a fixed timer and can be paused
or stepped by hand.  The state lives in an immutable
:class:`PlaybackState`; every transition returns a new state and whatever
drives the timer simply calls :func:`tick` on each period.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from pydantic import BaseModel, Field, model_validator

from seminar_charts.exceptions import InsufficientDataError

T = TypeVar("T")


class PlaybackState(BaseModel):
    """Position and run flag of a playback session."""

    model_config = {"frozen": True}

    frame_index: int = Field(default=0, ge=0)
    n_frames: int = Field(gt=0)
    playing: bool = True

    @model_validator(mode="after")
    def _index_in_range(self) -> PlaybackState:
        if self.frame_index >= self.n_frames:
            raise ValueError(
                f"frame_index {self.frame_index} outside 0..{self.n_frames - 1}"
            )
        return self


def reset_playback(n_frames: int, playing: bool = True) -> PlaybackState:
    """Fresh session over *n_frames* frames, e.g. after loading a new file."""
    if n_frames < 1:
        raise InsufficientDataError("reset_playback: no frames to play")
    return PlaybackState(frame_index=0, n_frames=n_frames, playing=playing)


def advance_frame(state: PlaybackState) -> PlaybackState:
    """Move to the next frame, wrapping to the first after the last."""
    return state.model_copy(
        update={"frame_index": (state.frame_index + 1) % state.n_frames}
    )


def tick(state: PlaybackState) -> PlaybackState:
    """Timer callback: advance only while playing."""
    return advance_frame(state) if state.playing else state


def toggle_playback(state: PlaybackState) -> PlaybackState:
    return state.model_copy(update={"playing": not state.playing})


def step_frame(state: PlaybackState) -> PlaybackState:
    """Manual "next frame": pause playback, then advance one frame."""
    return advance_frame(state.model_copy(update={"playing": False}))


def current_frame(state: PlaybackState, frames: Sequence[T]) -> T:
    if len(frames) != state.n_frames:
        raise ValueError(
            f"state covers {state.n_frames} frames but {len(frames)} were given"
        )
    return frames[state.frame_index]
