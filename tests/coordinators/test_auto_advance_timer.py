"""Unit tests for AutoAdvanceTimer."""

import pytest
from PySide6.QtTest import QTest

from comic_reader.coordinators import RUNNING, STOPPED, AutoAdvanceTimer, ViewportController
from comic_reader.core import Document


@pytest.fixture
def viewport():
    return ViewportController(Document(title="Space Cats", slug="space-cats", total_pages=5))


@pytest.fixture
def timer(viewport):
    timer = AutoAdvanceTimer(viewport)
    yield timer
    timer.stop()


class TestStateMachine:

    def test_starts_stopped(self, timer):
        assert timer.state == STOPPED
        assert not timer.is_running

    def test_start_and_stop(self, timer):
        states = []
        timer.state_changed.connect(lambda state: states.append(state))

        timer.start(5000)
        timer.stop()

        assert states == [RUNNING, STOPPED]
        assert timer.state == STOPPED

    def test_start_while_running_changes_nothing(self, timer):
        timer.start(5000)
        timer.start(1000)

        assert timer.is_running
        assert timer.interval_ms == 5000

    def test_stop_while_stopped_emits_nothing(self, timer):
        states = []
        timer.state_changed.connect(lambda state: states.append(state))

        timer.stop()

        assert states == []

    def test_toggle(self, timer):
        timer.toggle(5000)
        assert timer.is_running
        timer.toggle(5000)
        assert not timer.is_running

    @pytest.mark.parametrize("interval", [0, -100])
    def test_non_positive_interval_rejected(self, timer, interval):
        with pytest.raises(ValueError):
            timer.start(interval)
        assert timer.state == STOPPED

    def test_viewport_required(self):
        with pytest.raises(ValueError):
            AutoAdvanceTimer(None)


class TestTicks:

    def test_tick_advances_one_page(self, timer, viewport):
        timer.start(5000)
        timer._on_tick()

        assert viewport.current_page == 2
        assert timer.is_running

    def test_tick_on_last_page_stops_without_wrapping(self, timer, viewport):
        viewport.set_page(5)
        timer.start(5000)

        timer._on_tick()

        assert viewport.current_page == 5
        assert timer.state == STOPPED

    def test_tick_after_stop_is_ignored(self, timer, viewport):
        timer.start(5000)
        timer.stop()

        timer._on_tick()

        assert viewport.current_page == 1

    def test_real_timer_runs_to_the_end(self, timer, viewport):
        timer.start(10)

        waited = 0
        while timer.is_running and waited < 2000:
            QTest.qWait(10)
            waited += 10

        assert viewport.current_page == 5
        assert timer.state == STOPPED
