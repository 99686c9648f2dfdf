from fiscal_dashboard.config import Settings, get_settings


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("DASHBOARD_CATEGORY", raising=False)
    monkeypatch.delenv("DASHBOARD_CRITICAL_LIMIT", raising=False)
    monkeypatch.delenv("DASHBOARD_DEBUG", raising=False)
    settings = Settings()
    assert settings.category == "Obrigações"
    assert settings.critical_limit == 5
    assert settings.debug is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DASHBOARD_CATEGORY", "Pagamento")
    monkeypatch.setenv("DASHBOARD_CRITICAL_LIMIT", "10")
    monkeypatch.setenv("DASHBOARD_DEBUG", "true")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.category == "Pagamento"
        assert settings.critical_limit == 10
        assert settings.debug is True
    finally:
        get_settings.cache_clear()


def test_negative_critical_limit_is_clamped(monkeypatch):
    monkeypatch.setenv("DASHBOARD_CRITICAL_LIMIT", "-3")
    assert Settings().critical_limit == 0
