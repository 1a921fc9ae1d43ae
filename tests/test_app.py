"""Tests for the front-end: drawing helpers, key bindings and the main loop."""

import random

import pygame
import pytest

from sortscope import app
from sortscope.app import (
    COMPARE_COLOR,
    MERGE_COLOR,
    PIVOT_COLOR,
    SORTED_COLOR,
    SWAP_COLOR,
    apply_args,
    bar_colors,
    build_parser,
    handle_key,
    value_to_color,
)
from sortscope.config import Settings
from sortscope.playback import PlaybackStatus
from sortscope.session import VisualizerSession
from sortscope.steps import COMPARE, MERGE, PIVOT, SWAP, SortStep

from .conftest import RecordingSonifier


class MuteSwitch(RecordingSonifier):
    muted = False

    def toggle_mute(self):
        self.muted = not self.muted
        return self.muted


@pytest.fixture
def session(controller):
    return VisualizerSession(controller, size=12, rng=random.Random(1))


class TestColors:
    def test_value_gradient_ends(self):
        assert value_to_color(0, 100) == (0, 0, 255)
        assert value_to_color(100, 100) == (255, 0, 0)
        assert value_to_color(5, 0) == (0, 0, 255)

    def test_highlights(self):
        arr = (3, 1, 2)
        assert bar_colors(SortStep(arr, COMPARE, (0, 1)), 3)[:2] == [COMPARE_COLOR] * 2
        assert bar_colors(SortStep(arr, SWAP, (1, 2)), 3)[1:] == [SWAP_COLOR] * 2
        assert bar_colors(SortStep(arr, MERGE, (2,)), 3)[2] == MERGE_COLOR
        assert bar_colors(SortStep(arr, PIVOT, (2,), pivot=2), 3)[2] == PIVOT_COLOR

    def test_pivot_wins_over_compare(self):
        colors = bar_colors(SortStep((3, 1, 2), COMPARE, (0, 2), pivot=2), 3)
        assert colors[0] == COMPARE_COLOR
        assert colors[2] == PIVOT_COLOR

    def test_sorted_step_is_all_green(self):
        assert bar_colors(SortStep((1, 2), COMPARE, (), sorted=True), 2) == [SORTED_COLOR] * 2


class TestKeys:
    def test_space_toggles_play(self, session, controller):
        handle_key(pygame.K_SPACE, session, MuteSwitch())
        assert controller.is_playing
        handle_key(pygame.K_SPACE, session, MuteSwitch())
        assert controller.status is PlaybackStatus.PAUSED

    def test_space_replays_when_finished(self, session, controller):
        controller.seek(len(controller.steps))
        handle_key(pygame.K_SPACE, session, MuteSwitch())
        assert controller.is_playing
        assert controller.current_step == 0

    def test_arrows_step(self, session, controller):
        handle_key(pygame.K_RIGHT, session, MuteSwitch())
        handle_key(pygame.K_RIGHT, session, MuteSwitch())
        handle_key(pygame.K_LEFT, session, MuteSwitch())
        assert controller.current_step == 1

    def test_number_selects_algorithm(self, session):
        handle_key(pygame.K_6, session, MuteSwitch())
        assert session.algorithm == "heap"

    def test_mute(self, session):
        s = MuteSwitch()
        handle_key(pygame.K_m, session, s)
        assert s.muted

    def test_speed_keys(self, session, controller):
        before = controller.speed
        handle_key(pygame.K_DOWN, session, MuteSwitch())
        assert controller.speed == before + 10

    def test_escape_quits(self, session):
        assert handle_key(pygame.K_ESCAPE, session, MuteSwitch()) is False
        assert handle_key(pygame.K_r, session, MuteSwitch()) is True


class TestArgs:
    def test_args_override_settings(self):
        args = build_parser().parse_args(["--algorithm", "merge", "--size", "500", "--mute"])
        s = apply_args(Settings(), args)
        assert s.algorithm == "merge"
        assert s.size == 200
        assert s.muted is True

    def test_no_args_keeps_settings(self):
        s = apply_args(Settings(speed=77), build_parser().parse_args([]))
        assert s.speed == 77


class TestRunLoop:
    def test_quit_wins_over_later_key_in_same_frame(self, monkeypatch):
        monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
        monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
        saved = []
        monkeypatch.setattr(app, "save_settings", lambda s: saved.append(s))
        batches = [[pygame.event.Event(pygame.QUIT),
                    pygame.event.Event(pygame.KEYDOWN, key=pygame.K_r)]]
        calls = []

        def fake_get():
            calls.append(1)
            # a second frame only happens if the close was ignored
            return batches.pop(0) if batches else [pygame.event.Event(pygame.QUIT)]

        monkeypatch.setattr(pygame.event, "get", fake_get)
        app.run(Settings(size=10, muted=True))
        assert len(calls) == 1
        assert saved and saved[0].size == 10
