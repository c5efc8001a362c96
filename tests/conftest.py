import re

import pytest

from mutable._cogs.configs.configuration import TrackingSettings, get_default_settings, \
                                                set_default_settings


def pytest_configure(config):
    # Unexpected warnings should fail the tests. Use `-Wignore` to explicitly disable it.
    config.addinivalue_line('filterwarnings', 'error')


@pytest.fixture()
def settings():
    return TrackingSettings()


@pytest.fixture(autouse=True)
def _restore_default_settings():
    original = get_default_settings()
    yield
    set_default_settings(original)


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)


@pytest.fixture()
def assert_logs(caplog):
    """
    Assert that the log messages match the patterns, in the given order.

    Other messages can be interleaved with the expected ones, and are ignored.
    """
    def assert_logs_fn(patterns):
        __traceback_hide__ = True
        expected = list(patterns)
        for message in caplog.messages:
            matched = [idx for idx, pattern in enumerate(expected) if re.search(pattern, message)]
            if matched and matched[0] > 0:
                raise AssertionError(f"Log patterns were skipped: {expected[:matched[0]]!r}")
            elif matched:
                del expected[0]

        if expected:
            raise AssertionError(f"Log patterns were missed: {expected!r}")

    return assert_logs_fn
