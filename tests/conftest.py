"""Shared fixtures for the amd-detective test suite."""

import pytest

from amd_detective.config import reset_config
from amd_detective.error_handling import get_error_handler


@pytest.fixture(scope="session", autouse=True)
def error_handler():
    """Create the global error handler before any CLI run swaps stderr."""
    return get_error_handler()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config files and AMD_DETECTIVE_* variables from leaking into tests."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in [
        "AMD_DETECTIVE_SKIP_LAZY_LOADED",
        "AMD_DETECTIVE_MAX_FILE_SIZE_MB",
        "AMD_DETECTIVE_OUTPUT_FORMAT",
        "AMD_DETECTIVE_LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_dir(tmp_path):
    """Directory for sample source files."""
    path = tmp_path / "sources"
    path.mkdir()
    return path


@pytest.fixture
def sample_deps_module(temp_dir):
    """A define([deps], factory) module with one lazy require."""
    path = temp_dir / "deps.js"
    path.write_text(
        """
define(["jquery", "./util"], function ($, util) {
    return {
        later: function () {
            require(["./lazy"], function (lazy) {});
        }
    };
});
""".strip()
    )
    return path


@pytest.fixture
def sample_rem_module(temp_dir):
    """A CommonJS-wrapped (REM) module."""
    path = temp_dir / "rem.js"
    path.write_text(
        """
define(function (require, exports, module) {
    var events = require("events");
    var util = require("./util");
    exports.run = function () {
        return util(events);
    };
});
""".strip()
    )
    return path


@pytest.fixture
def sample_broken_module(temp_dir):
    """A file that is not valid JavaScript."""
    path = temp_dir / "broken.js"
    path.write_text('define(["a", function (a) {\n')
    return path
