"""Test cases for call-site scanning."""

import textwrap

import pytest

from loadfile.build.callsites import CallSite, SourceSpan, scan_callsites
from loadfile.content import ContentKind
from loadfile.exceptions import BuildError, ResolutionError


def _scan(source: str) -> list[CallSite]:
    return scan_callsites(textwrap.dedent(source), "/proj/mod.py")


class TestImportForms:
    def test_from_import(self) -> None:
        sites = _scan(
            """
            from loadfile import load_str
            TEXT = load_str("a.txt")
            """
        )
        assert len(sites) == 1
        assert sites[0].entry_point == "load_str"
        assert sites[0].kind is ContentKind.TEXT
        assert sites[0].literal == "a.txt"

    def test_from_import_alias(self) -> None:
        sites = _scan(
            """
            from loadfile import load_bytes as read_asset
            LOGO = read_asset("logo.png")
            """
        )
        assert [(s.entry_point, s.kind) for s in sites] == [
            ("load_bytes", ContentKind.BYTES)
        ]

    def test_module_import(self) -> None:
        sites = _scan(
            """
            import loadfile
            A = loadfile.load_str("a.txt")
            B = loadfile.load_bytes("b.bin")
            """
        )
        assert [s.literal for s in sites] == ["a.txt", "b.bin"]

    def test_module_import_alias(self) -> None:
        sites = _scan(
            """
            import loadfile as lf
            A = lf.load_str("a.txt")
            """
        )
        assert [s.literal for s in sites] == ["a.txt"]

    def test_runtime_submodule(self) -> None:
        sites = _scan(
            """
            import loadfile.runtime
            from loadfile import runtime as rt
            from loadfile.runtime import load_bytes
            A = loadfile.runtime.load_str("a.txt")
            B = rt.load_str("b.txt")
            C = load_bytes("c.bin")
            """
        )
        assert [s.literal for s in sites] == ["a.txt", "b.txt", "c.bin"]

    def test_runtime_attribute_of_bound_package(self) -> None:
        sites = _scan(
            """
            import loadfile
            import loadfile as lf
            A = loadfile.runtime.load_str("a.txt")
            B = lf.runtime.load_bytes("b.bin")
            """
        )
        assert [(s.entry_point, s.literal) for s in sites] == [
            ("load_str", "a.txt"),
            ("load_bytes", "b.bin"),
        ]

    def test_runtime_attribute_of_other_module_ignored(self) -> None:
        sites = _scan(
            """
            import loadfile.runtime as rt
            import other
            A = other.runtime.load_str("a.txt")
            B = rt.runtime.load_str("b.txt")
            """
        )
        assert sites == []

    def test_without_import_nothing_found(self) -> None:
        sites = _scan(
            """
            def load_str(path):
                return path
            A = load_str("a.txt")
            """
        )
        assert sites == []

    def test_other_modules_ignored(self) -> None:
        sites = _scan(
            """
            from mylib import load_str
            import other as lf
            A = load_str("a.txt")
            B = lf.load_str("b.txt")
            """
        )
        assert sites == []

    def test_relative_import_ignored(self) -> None:
        sites = _scan(
            """
            from .loadfile import load_str
            A = load_str("a.txt")
            """
        )
        assert sites == []

    def test_import_inside_function(self) -> None:
        sites = _scan(
            """
            def f():
                from loadfile import load_str
                return load_str("a.txt")
            """
        )
        assert len(sites) == 1


class TestSpans:
    def test_call_and_argument_spans(self) -> None:
        sites = scan_callsites(
            'from loadfile import load_str\nX = load_str("a.txt")\n', "/p/m.py"
        )
        site = sites[0]
        assert site.call == SourceSpan(2, 4, 2, 21)
        assert site.arg == SourceSpan(2, 13, 2, 20)
        assert site.lineno == 2

    def test_multiline_call(self) -> None:
        sites = _scan(
            """
            from loadfile import load_str
            X = load_str(
                "a.txt"
            )
            """
        )
        site = sites[0]
        assert site.call.lineno == 3
        assert site.call.end_lineno == 5
        assert site.arg.lineno == 4

    def test_source_order(self) -> None:
        sites = _scan(
            """
            from loadfile import load_bytes, load_str
            def later():
                return load_bytes("second.bin")
            FIRST = load_str("first.txt")
            """
        )
        assert [s.literal for s in sites] == ["second.bin", "first.txt"]

    def test_calls_inside_fstrings_are_flagged(self) -> None:
        sites = _scan(
            """
            from loadfile import load_str
            PLAIN = load_str("a.txt")
            QUOTED = f"<{load_str('b.txt')}>"
            NESTED = f"{'x':{len(load_str('c.txt'))}}"
            """
        )
        assert [(s.literal, s.in_fstring) for s in sites] == [
            ("a.txt", False),
            ("b.txt", True),
            ("c.txt", True),
        ]

    def test_implicit_concatenation_is_one_literal(self) -> None:
        sites = _scan(
            """
            from loadfile import load_str
            X = load_str("templates/" "page.html")
            """
        )
        assert sites[0].literal == "templates/page.html"


class TestInvalidCalls:
    @pytest.mark.parametrize(
        "call",
        [
            "load_str(name)",
            'load_str(f"{name}.txt")',
            'load_str("a" + name)',
            "load_str(b'a.txt')",
            "load_str(42)",
        ],
    )
    def test_non_literal_argument(self, call: str) -> None:
        source = f"from loadfile import load_str\nname = 'x'\nX = {call}\n"
        with pytest.raises(ResolutionError) as exc_info:
            scan_callsites(source, "/p/m.py")
        assert "string literal" in str(exc_info.value)
        assert exc_info.value.lineno == 3
        assert exc_info.value.filename == "/p/m.py"

    @pytest.mark.parametrize(
        "call",
        [
            "load_str()",
            'load_str("a", "b")',
            'load_str(path="a")',
            "load_str(*paths)",
        ],
    )
    def test_wrong_arguments(self, call: str) -> None:
        source = f"from loadfile import load_str\npaths = ['a']\nX = {call}\n"
        with pytest.raises(ResolutionError, match="exactly one positional"):
            scan_callsites(source, "/p/m.py")

    def test_syntax_error(self) -> None:
        with pytest.raises(BuildError, match="cannot parse"):
            scan_callsites("from loadfile import load_str\nX = load_str(\n", "/p/m.py")

    def test_unrelated_source_not_parsed(self) -> None:
        # no entry point names: not even parsed, so invalid syntax is fine
        assert scan_callsites("this is not python", "/p/m.py") == []
