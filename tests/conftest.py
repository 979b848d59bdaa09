"""Shared test fixtures for lintgate."""

import json
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import pytest

from lintgate.config import OrchestratorConfig
from lintgate.models import ToolOutput


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


Response = Union[ToolOutput, Callable[[List[str]], ToolOutput]]


class FakeRunner:
    """ToolRunner stand-in returning scripted outputs and recording calls.

    ``responses`` is consulted in order: the first entry whose key is a
    substring of the joined command wins. Unmatched commands succeed with
    empty output.
    """

    def __init__(self, responses: Optional[Sequence[tuple]] = None):
        self.responses = list(responses or [])
        self.calls: List[dict] = []

    def run(self, args, cwd, timeout):
        args = list(args)
        self.calls.append({"args": args, "cwd": cwd, "timeout": timeout})
        joined = " ".join(args)
        for key, response in self.responses:
            if key in joined:
                return response(args) if callable(response) else response
        return ToolOutput(returncode=0, output="", duration_ms=5)

    def commands(self) -> List[str]:
        return [" ".join(c["args"]) for c in self.calls]


def ok(output: str = "", duration_ms: int = 5) -> ToolOutput:
    return ToolOutput(returncode=0, output=output, duration_ms=duration_ms)


def failed(returncode: int = 1, output: str = "") -> ToolOutput:
    return ToolOutput(returncode=returncode, output=output, duration_ms=5)


def timed_out() -> ToolOutput:
    return ToolOutput(returncode=124, output="", duration_ms=120_000, timed_out=True)


def make_package(
    root: Path,
    rel: str,
    name: Optional[str] = None,
    lint: bool = True,
    size: int = 0,
    typecheck: bool = False,
    tests: bool = False,
    private: bool = False,
) -> Path:
    """Create a package directory with a manifest and optional padding file."""
    directory = root / rel
    directory.mkdir(parents=True, exist_ok=True)
    scripts = {}
    if lint:
        scripts["lint"] = "eslint ."
    if tests:
        scripts["test"] = "jest"
    manifest = {"scripts": scripts, "private": private}
    if name is not None:
        manifest["name"] = name
    (directory / "package.json").write_text(json.dumps(manifest))
    if typecheck:
        (directory / "tsconfig.json").write_text("{}")
    if size:
        (directory / "blob.js").write_bytes(b"x" * size)
    return directory


@pytest.fixture
def config():
    """Default config with the discovery cache off."""
    return OrchestratorConfig(cache_enabled=False)


@pytest.fixture
def workspace(tmp_path):
    """Empty workspace with a packages/ directory."""
    (tmp_path / "packages").mkdir()
    return tmp_path


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def runner_factory():
    """Build a FakeRunner from (substring, response) pairs."""
    return FakeRunner


@pytest.fixture
def package_factory():
    return make_package


@pytest.fixture
def outputs():
    """Scripted ToolOutput builders."""

    class _Outputs:
        ok = staticmethod(ok)
        failed = staticmethod(failed)
        timed_out = staticmethod(timed_out)

    return _Outputs
