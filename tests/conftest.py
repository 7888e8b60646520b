from datetime import date

import pytest

from cadastro.common.settings import get_settings

FIXED_TODAY = date(2024, 6, 15)


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    for name in ("PLUGGY_CLIENT_ID", "PLUGGY_CLIENT_SECRET", "MAKE_WEBHOOK_URL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def today():
    return lambda: FIXED_TODAY
