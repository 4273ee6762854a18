import pytest


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep the caller's Composer and vendorscope settings out of the tests."""
    for var in ("COMPOSER_VENDOR_DIR", "VENDORSCOPE_MANIFEST"):
        monkeypatch.delenv(var, raising=False)
