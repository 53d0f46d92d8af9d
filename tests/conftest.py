import logging

import pytest

from sanepath import Path


@pytest.fixture
def scratch(tmp_path, monkeypatch):
    "run the test inside an empty working directory"
    monkeypatch.chdir(tmp_path)
    return Path(str(tmp_path))


@pytest.fixture
def errors(caplog):
    caplog.set_level(logging.DEBUG, logger='sanepath')
    return caplog
