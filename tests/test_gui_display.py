"""
Tests for window-state handling of the Qt display.
"""

import pytest

QtCore = pytest.importorskip("PyQt5.QtCore")
pytest.importorskip("PyQt5.QtWidgets")

from countdown1356.display.gui_display import visibility_transition  # noqa: E402

Qt = QtCore.Qt
NORMAL = int(Qt.WindowNoState)
MAXIMIZED = int(Qt.WindowMaximized)
MINIMIZED = int(Qt.WindowMinimized)


class TestVisibilityTransition:
    """Only minimize and restore-from-minimize change display attachment."""

    def test_minimize_hides(self):
        assert visibility_transition(NORMAL, MINIMIZED) == "hidden"
        assert visibility_transition(MAXIMIZED, MINIMIZED | MAXIMIZED) == "hidden"

    def test_restore_from_minimized_shows(self):
        assert visibility_transition(MINIMIZED, NORMAL) == "shown"
        assert visibility_transition(MINIMIZED | MAXIMIZED, MAXIMIZED) == "shown"

    def test_maximize_and_restore_are_ignored(self):
        assert visibility_transition(NORMAL, MAXIMIZED) is None
        assert visibility_transition(MAXIMIZED, NORMAL) is None

    def test_unchanged_minimized_state_is_ignored(self):
        assert visibility_transition(MINIMIZED, MINIMIZED) is None
