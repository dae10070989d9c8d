import os

import pytest

from planeframe.model.geometry_primitives import ViewDimensions, Viewport, WorldPoint


@pytest.fixture(scope="session")
def qapp():
    """Widgets need a QApplication; the offscreen platform runs without a display."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def viewport():
    return Viewport(pan=WorldPoint(0.0, 0.0), zoom=1.0, min_zoom=1e-8, max_zoom=1e8)


@pytest.fixture
def dims():
    return ViewDimensions(800.0, 600.0)
