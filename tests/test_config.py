import pytest

from planeframe import config


@pytest.fixture
def settings_file(qapp, tmp_path):
    from PySide6.QtCore import QSettings
    QSettings.setPath(QSettings.Format.IniFormat, QSettings.Scope.UserScope, str(tmp_path))
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)
    qapp.setOrganizationName("planeframe-tests")
    qapp.setApplicationName("planeframe-tests")
    settings = QSettings()
    settings.clear()
    yield settings
    settings.clear()


def test_defaults():
    s = config.DEFAULT_SETTINGS
    assert (s.min_zoom, s.max_zoom) == (1e-8, 1e8)
    assert (s.node_tolerance, s.element_tolerance) == (15.0, 5.0)
    assert s.base_grid_size == 20.0


def test_load_settings_without_overrides(settings_file):
    assert config.load_settings() == config.DEFAULT_SETTINGS


def test_load_settings_applies_overrides(settings_file):
    settings_file.setValue("hit/node_tolerance", "8")
    settings_file.setValue("grid/max_points", "500")
    settings_file.setValue("viewport/max_zoom", "not-a-number")
    settings_file.sync()

    loaded = config.load_settings()

    assert loaded.node_tolerance == 8.0
    assert loaded.max_grid_points == 500
    assert loaded.max_zoom == config.MAX_ZOOM


def test_load_settings_ignores_inverted_zoom_range(settings_file):
    settings_file.setValue("viewport/min_zoom", "10")
    settings_file.setValue("viewport/max_zoom", "1")
    settings_file.sync()

    loaded = config.load_settings()

    assert (loaded.min_zoom, loaded.max_zoom) == (config.MIN_ZOOM, config.MAX_ZOOM)


def test_load_settings_ignores_out_of_range_values(settings_file):
    settings_file.setValue("hit/node_tolerance", "-3")
    settings_file.setValue("grid/base_size", "0")
    settings_file.setValue("view/fit_padding", "0")
    settings_file.sync()

    loaded = config.load_settings()

    assert loaded.node_tolerance == config.NODE_TOLERANCE_PX
    assert loaded.base_grid_size == config.BASE_GRID_SIZE
    assert loaded.fit_padding == 0.0


def test_load_settings_keeps_valid_zoom_range_above_one(settings_file):
    settings_file.setValue("viewport/min_zoom", "2")
    settings_file.sync()

    assert config.load_settings().min_zoom == 2.0
