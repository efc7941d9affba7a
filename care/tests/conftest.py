import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # DRF throttles keep their history in the default cache
    cache.clear()
    yield
    cache.clear()
