import pytest

from tests.fakes import FakeSession


@pytest.fixture
def fake_session():
    return FakeSession()
