"""Tests for ClockDriver."""

from __future__ import annotations

import pytest
from PyQt6.QtTest import QSignalSpy

from kingside.core.enums import Color
from kingside.game.interfaces import GamePhase
from kingside.game.result import EndReason
from kingside.game.session import GameSession
from kingside.game.settings import GameSettings
from kingside.host.clock_driver import ClockDriver


def _session(seconds: int = 60) -> GameSession:
    session = GameSession()
    session.initialize_game(GameSettings(time_per_player=seconds))
    return session


class TestClockDriver:
    def test_starts_with_active_game(self, qapp: object) -> None:
        driver = ClockDriver(_session())
        assert driver.is_running
        driver.detach()

    def test_waits_for_game_start(self, qapp: object) -> None:
        session = GameSession()
        driver = ClockDriver(session)
        assert not driver.is_running

        session.initialize_game(GameSettings(time_per_player=60))
        assert driver.is_running
        driver.detach()

    def test_rejects_bad_interval(self, qapp: object) -> None:
        with pytest.raises(ValueError):
            ClockDriver(_session(), interval_ms=0)

    def test_tick_reports_both_clocks(self, qapp: object) -> None:
        session = _session()
        driver = ClockDriver(session)
        ticks = QSignalSpy(driver.ticked)

        driver._tick()
        session.submit_move("e2", "e4")
        driver._tick()

        assert list(ticks[0]) == [59, 60]
        assert list(ticks[1]) == [59, 59]
        driver.detach()

    def test_long_interval_ticks_whole_seconds(self, qapp: object) -> None:
        session = _session()
        driver = ClockDriver(session, interval_ms=2500)
        driver._tick()
        assert session.clock is not None
        assert session.clock.remaining(Color.WHITE) == 58
        driver.detach()

    def test_short_interval_keeps_wall_clock_pace(self, qapp: object) -> None:
        session = _session()
        driver = ClockDriver(session, interval_ms=500)
        ticks = QSignalSpy(driver.ticked)

        driver._tick()
        assert session.clock is not None
        assert session.clock.remaining(Color.WHITE) == 60
        driver._tick()
        assert session.clock.remaining(Color.WHITE) == 59
        driver._tick()
        driver._tick()
        assert session.clock.remaining(Color.WHITE) == 58

        assert len(ticks) == 4
        driver.detach()

    def test_pause_and_resume(self, qapp: object) -> None:
        session = _session()
        driver = ClockDriver(session)
        stopped = QSignalSpy(driver.stopped)

        session.pause()
        assert not driver.is_running
        assert len(stopped) == 1

        session.resume()
        assert driver.is_running
        driver.detach()
        assert len(stopped) == 2

    def test_timeout_stops_once(self, qapp: object) -> None:
        session = _session(seconds=2)
        driver = ClockDriver(session)
        stopped = QSignalSpy(driver.stopped)

        driver._tick()
        driver._tick()

        assert session.phase == GamePhase.ENDED
        assert session.result is not None
        assert session.result.reason == EndReason.TIMEOUT
        assert session.result.winner == Color.BLACK
        assert not driver.is_running

        driver._tick()
        assert len(stopped) == 1

    def test_late_tick_after_end_does_not_touch_clock(self, qapp: object) -> None:
        session = _session()
        driver = ClockDriver(session)
        session.resign(Color.WHITE)
        ticks = QSignalSpy(driver.ticked)

        driver._tick()

        assert len(ticks) == 0
        assert session.clock is not None
        assert session.clock.remaining(Color.WHITE) == 60

    def test_detach_ignores_later_phases(self, qapp: object) -> None:
        session = _session()
        driver = ClockDriver(session)
        driver.detach()

        session.pause()
        session.resume()

        assert not driver.is_running
