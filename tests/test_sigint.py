import signal

import pytest

from skyscrapers import sigint


@pytest.fixture
def restore_handler():
    original = signal.getsignal(signal.SIGINT)
    yield
    signal.signal(signal.SIGINT, original)
    sigint.reset()


def test_flag(restore_handler):
    sigint.initialize()
    assert not sigint.occurred()
    handler = signal.getsignal(signal.SIGINT)
    handler(signal.SIGINT, None)
    assert sigint.occurred()
    sigint.reset()
    assert not sigint.occurred()
