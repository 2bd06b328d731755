import sys
from pathlib import Path

import pytest


# Ensure the repository root (parent of this directory) is importable when running pytest from anywhere
THIS_DIR = Path(__file__).resolve().parent
ROOT_DIR = THIS_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    from settings import get_settings

    for name in (
        "AIR_QUALITY_API_URL",
        "AIR_QUALITY_API_TIMEOUT",
        "DASHBOARD_REFRESH_SECONDS",
        "DASHBOARD_TIMEZONE",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
