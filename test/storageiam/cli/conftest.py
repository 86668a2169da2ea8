import logging

import pytest
from typer.testing import CliRunner


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def config_dir(isolated_config):
    return str(isolated_config)


@pytest.fixture
def runner():
    yield CliRunner()
