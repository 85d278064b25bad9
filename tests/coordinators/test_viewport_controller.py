"""Unit tests for ViewportController."""

import pytest

from comic_reader.coordinators import ViewportController
from comic_reader.core import Document, FitMode, ReaderSettings


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def document():
    return Document(title="Space Cats", slug="space-cats", total_pages=20)


@pytest.fixture
def viewport(document):
    return ViewportController(document)


@pytest.fixture
def page_signals(viewport):
    received = []
    viewport.page_changed.connect(lambda page: received.append(page))
    return received


# ============================================================================
# Navigation
# ============================================================================


class TestNavigation:

    def test_initial_state(self, viewport):
        state = viewport.state

        assert state.current_page == 1
        assert state.zoom_percent == 120
        assert state.fit_mode is FitMode.WIDTH
        assert state.rotation == 0

    def test_initial_page_is_clamped(self, document):
        assert ViewportController(document, initial_page=50).current_page == 20
        assert ViewportController(document, initial_page=-3).current_page == 1

    def test_set_page_within_range(self, viewport, page_signals):
        assert viewport.set_page(5) == 5
        assert page_signals == [5]

    def test_set_page_below_range_clamps_to_first(self, viewport):
        viewport.set_page(7)
        assert viewport.set_page(0) == 1

    def test_set_page_above_range_clamps_to_last(self, viewport):
        assert viewport.set_page(999) == 20

    def test_same_page_emits_nothing(self, viewport, page_signals):
        viewport.set_page(1)
        assert page_signals == []

    def test_next_at_last_page_is_a_no_op(self, viewport, page_signals):
        viewport.set_page(20)
        page_signals.clear()

        assert viewport.next_page() is False
        assert viewport.current_page == 20
        assert page_signals == []

    def test_previous_at_first_page_is_a_no_op(self, viewport, page_signals):
        assert viewport.previous_page() is False
        assert page_signals == []

    def test_next_and_previous(self, viewport):
        assert viewport.next_page() is True
        assert viewport.next_page() is True
        assert viewport.previous_page() is True
        assert viewport.current_page == 2

    def test_first_and_last(self, viewport):
        assert viewport.last_page() is True
        assert viewport.current_page == 20
        assert viewport.first_page() is True
        assert viewport.current_page == 1

    def test_on_page_change_callback(self, document):
        seen = []
        viewport = ViewportController(document, on_page_change=seen.append)

        viewport.set_page(4)
        viewport.set_page(4)

        assert seen == [4]

    def test_derived_flags(self, viewport):
        assert not viewport.can_go_previous
        assert viewport.can_go_next

        viewport.set_page(20)

        assert viewport.can_go_previous
        assert not viewport.can_go_next
        assert viewport.progress_percentage == 100.0

    def test_single_page_document(self):
        viewport = ViewportController(Document(title="One Shot", slug="one", total_pages=1))
        assert not viewport.can_go_next
        assert not viewport.can_go_previous
        assert viewport.next_page() is False

    def test_document_required(self):
        with pytest.raises(ValueError):
            ViewportController(None)


# ============================================================================
# Zoom, fit mode and rotation
# ============================================================================


class TestZoom:

    def test_five_steps_in(self, viewport):
        for _ in range(5):
            viewport.zoom_in()
        assert viewport.zoom_percent == 220

    def test_zoom_clamps_at_maximum(self, viewport):
        assert viewport.set_zoom(1000) == 400
        assert viewport.zoom_in() == 400

    def test_zoom_clamps_at_minimum(self, viewport):
        for _ in range(10):
            viewport.zoom_out()
        assert viewport.zoom_percent == 20

    def test_zoom_signal_only_on_change(self, viewport):
        received = []
        viewport.zoom_changed.connect(lambda zoom: received.append(zoom))

        viewport.set_zoom(400)
        viewport.zoom_in()

        assert received == [400]

    def test_reset_zoom(self, viewport):
        viewport.zoom_in()
        assert viewport.reset_zoom() == 120

    def test_toggle_zoom(self, viewport):
        assert viewport.toggle_zoom() == 200
        assert viewport.toggle_zoom() == 120

    def test_toggle_zoom_from_zoomed_out_goes_to_double_tap_zoom(self, viewport):
        viewport.zoom_out()
        assert viewport.toggle_zoom() == 200


class TestFitModeAndRotation:

    def test_fit_mode_from_settings(self, document):
        viewport = ViewportController(document, settings=ReaderSettings(fit_mode=FitMode.HEIGHT))
        assert viewport.fit_mode is FitMode.HEIGHT

    def test_set_fit_mode_accepts_names(self, viewport):
        received = []
        viewport.fit_mode_changed.connect(lambda mode: received.append(mode))

        assert viewport.set_fit_mode("page") is FitMode.PAGE
        assert received == ["page"]

    def test_unknown_fit_mode_rejected(self, viewport):
        with pytest.raises(ValueError):
            viewport.set_fit_mode("stretch")
        assert viewport.fit_mode is FitMode.WIDTH

    def test_rotation_wraps(self, viewport):
        for _ in range(3):
            viewport.rotate()
        assert viewport.rotation == 270
        assert viewport.rotate() == 0
