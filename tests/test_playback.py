"""Tests for seminar_charts.playback."""


import pytest
from pydantic import ValidationError

from seminar_charts.exceptions import InsufficientDataError
from seminar_charts.playback import (
    PlaybackState,
    advance_frame,
    current_frame,
    reset_playback,
    step_frame,
    tick,
    toggle_playback,
)


class TestPlaybackState:
    def test_frozen(self):
        state = reset_playback(3)
        with pytest.raises(ValidationError):
            state.frame_index = 1

    def test_index_in_range(self):
        with pytest.raises(ValidationError):
            PlaybackState(frame_index=3, n_frames=3)
        with pytest.raises(ValidationError):
            PlaybackState(frame_index=-1, n_frames=3)

    def test_needs_frames(self):
        with pytest.raises(ValidationError):
            PlaybackState(n_frames=0)


class TestTransitions:
    def test_reset(self):
        state = reset_playback(4)
        assert (state.frame_index, state.n_frames, state.playing) == (0, 4, True)
        assert reset_playback(4, playing=False).playing is False

    def test_reset_without_frames(self):
        with pytest.raises(InsufficientDataError):
            reset_playback(0)

    def test_advance_wraps(self):
        state = reset_playback(3)
        indices = []
        for _ in range(4):
            state = advance_frame(state)
            indices.append(state.frame_index)
        assert indices == [1, 2, 0, 1]

    def test_single_frame(self):
        state = reset_playback(1)
        assert advance_frame(state).frame_index == 0

    def test_tick_only_while_playing(self):
        state = reset_playback(3)
        assert tick(state).frame_index == 1
        paused = toggle_playback(state)
        assert paused.playing is False
        assert tick(paused) == paused

    def test_toggle_round_trip(self):
        state = reset_playback(3)
        assert toggle_playback(toggle_playback(state)) == state

    def test_step_pauses_and_advances(self):
        state = step_frame(reset_playback(3))
        assert state.playing is False
        assert state.frame_index == 1
        assert step_frame(state).frame_index == 2

    def test_transitions_do_not_mutate(self):
        state = reset_playback(3)
        advance_frame(state)
        step_frame(state)
        assert state.frame_index == 0
        assert state.playing is True


class TestCurrentFrame:
    def test_lookup(self):
        frames = ["a", "b", "c"]
        state = advance_frame(reset_playback(len(frames)))
        assert current_frame(state, frames) == "b"

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="frames"):
            current_frame(reset_playback(2), ["a", "b", "c"])
