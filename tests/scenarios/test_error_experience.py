"""Diagnostics a user sees when a call site or its file is wrong."""

from pathlib import Path

import pytest

from loadfile.build.config import BuildConfig, LoadMode
from loadfile.build.tree import build_tree
from loadfile.exceptions import ContentError, ResolutionError


def _write_module(root: Path, body: str) -> None:
    root.mkdir(exist_ok=True)
    (root / "mod.py").write_text("from loadfile import load_str\n" + body, encoding="utf-8")


@pytest.mark.parametrize("mode", list(LoadMode))
def test_dynamic_path_fails_build_in_both_modes(tmp_path: Path, mode: LoadMode) -> None:
    src = tmp_path / "src"
    _write_module(src, "NAME = 'a.txt'\nTEXT = load_str(NAME)\n")

    with pytest.raises(ResolutionError) as exc_info:
        build_tree(src, tmp_path / "dist", BuildConfig(mode=mode))

    message = str(exc_info.value)
    assert "mod.py:3" in message
    assert "load_str() path must be a string literal, got 'NAME'" in message


def test_missing_file_message_names_call_and_path(tmp_path: Path) -> None:
    src = tmp_path / "src"
    _write_module(src, "TEXT = load_str('templates/missing.html')\n")

    with pytest.raises(ContentError) as exc_info:
        build_tree(src, tmp_path / "dist", BuildConfig())

    expected_path = src.resolve() / "templates" / "missing.html"
    assert str(exc_info.value) == (
        f"file not found in load_str('templates/missing.html'): {expected_path}"
    )


def test_early_check_catches_typo_in_runtime_build(tmp_path: Path) -> None:
    src = tmp_path / "src"
    _write_module(src, "TEXT = load_str('greting.txt')\n")
    (src / "greeting.txt").write_text("hi", encoding="utf-8")

    build_tree(src, tmp_path / "lenient", BuildConfig(mode=LoadMode.RUNTIME))

    with pytest.raises(ContentError, match="greting.txt"):
        build_tree(
            src,
            tmp_path / "strict",
            BuildConfig(mode=LoadMode.RUNTIME, early_check=True),
        )
