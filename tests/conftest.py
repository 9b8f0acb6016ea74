"""Shared fixtures for loadfile tests."""

import importlib.util
import itertools
from pathlib import Path
from types import ModuleType
from typing import Callable, Generator

import pytest

_module_counter = itertools.count()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep LOADFILE_* variables from the developer's shell out of tests."""
    for var in ("LOADFILE_MODE", "LOADFILE_EARLY_CHECK", "LOADFILE_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def import_path() -> Callable[[Path], ModuleType]:
    """Import a module from a file path under a fresh, unique name."""

    def _import(path: Path) -> ModuleType:
        name = f"_loadfile_test_module_{next(_module_counter)}"
        spec = importlib.util.spec_from_file_location(name, path)
        assert spec is not None and spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    return _import


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small source tree with data files next to and below its modules.

    ``src/app.py`` loads ``greeting.txt`` as text and ``data/blob.bin`` as
    bytes.
    """
    src = tmp_path / "src"
    (src / "data").mkdir(parents=True)
    (src / "greeting.txt").write_bytes(b"Hello, world!\n")
    (src / "data" / "blob.bin").write_bytes(b"\x00\xff\xfe binary \x80")
    (src / "app.py").write_text(
        "from loadfile import load_bytes, load_str\n"
        "\n"
        "\n"
        "def greeting():\n"
        "    # read on each call unless embedded\n"
        '    return load_str("greeting.txt")\n'
        "\n"
        "\n"
        "def blob():\n"
        '    return load_bytes("data/blob.bin")\n',
        encoding="utf-8",
    )
    (src / "plain.py").write_text("VALUE = 1\n", encoding="utf-8")
    return src
