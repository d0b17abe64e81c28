import os
import tempfile

import pytest


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: mark a test as slow to run (deselect with "
                   "'-m \"not slow\"')")


@pytest.fixture
def in_temporary_directory():
    """
    Creates a temporary directory for the lifetime of the fixture and changes
    into it.  All relative paths used will be in the temporary directory, and
    everything will automatically be cleaned up at the end of the fixture's
    life.
    """
    previous_dir = os.getcwd()
    with tempfile.TemporaryDirectory() as temporary_dir:
        os.chdir(temporary_dir)
        yield
        # pytest should catch exceptions occuring in functions using the
        # fixture, so this should always be called.  We want it here rather
        # than outside to prevent the case of the directory failing to be
        # removed because it is 'busy'.
        os.chdir(previous_dir)


@pytest.fixture
def restore_settings():
    """Undo changes tests make to :obj:`qmaster.settings`."""
    from qmaster.settings import settings
    saved = (settings.debug, settings.log_handler, settings.atol,
             settings.auto_tidyup, settings.sparse_threshold)
    yield settings
    (settings.debug, settings.log_handler, settings.atol,
     settings.auto_tidyup, settings.sparse_threshold) = saved
