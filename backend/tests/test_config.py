from app.config import get_settings


def test_settings_defaults(monkeypatch) -> None:
    for key in ["APP_NAME", "MAX_LEGS", "DISPLAY_PLACES", "LOG_LEVEL"]:
        monkeypatch.delenv(key, raising=False)

    get_settings.cache_clear()
    settings = get_settings()

    assert settings.app_name == "surebet-engine"
    assert settings.max_legs == 10
    assert settings.display_places == 2
    assert settings.log_level == "INFO"


def test_settings_env_overrides_and_floors(monkeypatch) -> None:
    monkeypatch.setenv("MAX_LEGS", "1")
    monkeypatch.setenv("DISPLAY_PLACES", "4")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    get_settings.cache_clear()
    settings = get_settings()

    assert settings.max_legs == 2
    assert settings.display_places == 4
    assert settings.log_level == "DEBUG"
    get_settings.cache_clear()
