import pytest

from lslmsr.config import get_default_engine_params


@pytest.fixture
def engine_params():
    return get_default_engine_params()
