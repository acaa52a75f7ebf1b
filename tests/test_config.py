import pytest
from pydantic import ValidationError

from roadtrip.config import Settings


def test_defaults_match_drive_time_table():
    config = Settings()
    assert config.average_speed_mph == 50
    assert (config.optimal_min_hours, config.optimal_max_hours) == (4.0, 6.0)
    assert (config.acceptable_min_hours, config.acceptable_max_hours) == (3.0, 7.5)
    assert (config.absolute_min_hours, config.absolute_max_hours) == (2.5, 8.0)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ROADTRIP_AVERAGE_SPEED_MPH", "55")
    monkeypatch.setenv("ROADTRIP_FRONTEND_ALLOWED_ORIGINS", "https://a.example, https://b.example")

    config = Settings()

    assert config.average_speed_mph == 55
    assert config.frontend_allowed_origins == ("https://a.example", "https://b.example")


def test_origins_accept_json_list(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ROADTRIP_FRONTEND_ALLOWED_ORIGINS", '["https://a.example"]')
    assert Settings().frontend_allowed_origins == ("https://a.example",)


def test_bands_must_nest():
    with pytest.raises(ValidationError):
        Settings(optimal_min_hours=7.0)
