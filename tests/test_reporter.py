"""
Reporter tests: recording order, the errored flag, and the rendered layout
of snippets, hints and end-of-file diagnostics.
"""

import json
import threading

import pytest

from tiny.ast      import Span
from tiny.reporter import Kind, Reporter, locate

from conftest import check


SOURCE = "fn main() { print(40000); }"


def rendered(reporter, capsys, source, filename=None):
    reporter.render(source, filename)
    return capsys.readouterr().err.splitlines()


def test_record_keeps_detection_order():
    reporter = Reporter()
    reporter.warning("first")
    reporter.error("second", Span(0, 1))
    reporter.hint("third")

    assert [d.text for d in reporter.diagnostics] == ["first", "second", "third"]
    assert [d.kind for d in reporter.diagnostics] == [Kind.WARNING, Kind.ERROR, Kind.HINT]


def test_only_errors_set_the_errored_flag():
    reporter = Reporter()
    reporter.warning("w")
    reporter.hint("h")
    reporter.constant("c")
    assert not reporter.has_errored()

    reporter.error("e")
    assert reporter.has_errored()

    # nothing resets it
    reporter.warning("w again")
    assert reporter.has_errored()


def test_info_is_printed_immediately_and_not_stored(capsys):
    reporter = Reporter()
    reporter.info("parsing done")

    assert capsys.readouterr().err == "info: parsing done\n"
    assert reporter.diagnostics == []


def test_checkpoint_logs_sections_when_verbose(capsys):
    reporter = Reporter(verbose=True)
    assert reporter.checkpoint("parsing")
    assert reporter.section == "parsing"
    assert "info: entering parsing" in capsys.readouterr().err

    reporter.error("boom")
    assert not reporter.checkpoint("analysis")


def test_concurrent_records_are_all_kept():
    reporter = Reporter()

    def worker():
        for _ in range(200):
            reporter.error("e")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(reporter.diagnostics) == 8 * 200


@pytest.mark.parametrize("source", [
    "",
    "abc",
    "a\nbc\n\ndef\n",
    "fn main() {\n    let x = 1;\n}\n",
])
def test_locate_counts_newlines_before_lo(source):
    for lo in range(len(source) + 1):
        line, col = locate(source, lo)
        assert line == 1 + source[:lo].count("\n")
        assert col == lo - (source.rfind("\n", 0, lo) + 1)


def test_render_single_line_snippet(capsys):
    reporter = Reporter()
    reporter.error("Value exceeds the maximum", Span(18, 23))

    assert rendered(reporter, capsys, SOURCE, "test.tiny") == [
        "error: Value exceeds the maximum",
        "  --> test.tiny:1:18",
        "   |",
        "1  | fn main() { print(40000); }",
        "   | " + " " * 18 + "^^^^^",
    ]


def test_render_without_filename_uses_stdin(capsys):
    reporter = Reporter()
    reporter.warning("careful", Span(3, 7))

    lines = rendered(reporter, capsys, SOURCE)
    assert lines[0] == "warning: careful"
    assert lines[1] == "  --> stdin:1:3"


def test_render_zero_width_span_underlines_to_end_of_line(capsys):
    reporter = Reporter()
    reporter.error("here", Span(3, 3))

    lines = rendered(reporter, capsys, "abc\nxyz")
    assert lines[-1] == "   | " + " " * 3 + "^"

    reporter = Reporter()
    reporter.error("here", Span(5, 5))
    lines = rendered(reporter, capsys, "abc\nxyz")
    assert lines[1] == "  --> stdin:2:1"
    assert lines[-1] == "   | " + " " + "^^"


def test_render_two_line_span_prints_both_lines(capsys):
    source = "let a =\n  12;\n"
    reporter = Reporter()
    reporter.error("spans two lines", Span(0, 12))

    assert rendered(reporter, capsys, source) == [
        "error: spans two lines",
        "  --> stdin:1:0",
        "   |",
        "1  | let a =",
        "2  |   12;",
        "   | ^^^^^^^",
    ]


def test_render_long_span_elides_middle_lines(capsys):
    source = "fn f() {\n    1;\n    2;\n}\n"
    reporter = Reporter()
    reporter.error("whole function", Span(0, len(source) - 1))

    lines = rendered(reporter, capsys, source)
    assert lines[3] == "1  | fn f() {"
    assert lines[4] == "   |    ..."
    assert lines[5] == "4  | }"
    assert lines[6] == "   | ^^^^^^^^"


def test_render_eof_of_empty_source(capsys):
    reporter = Reporter()
    reporter.error("Unexpected end of file")

    assert rendered(reporter, capsys, "", "empty.tiny") == [
        "error: Unexpected end of file",
        "  --> empty.tiny:0",
        "   |",
        "0  | (EOF)",
        "   |  ^^^",
    ]


def test_render_eof_shows_last_two_lines(capsys):
    reporter = Reporter()
    reporter.error("Unexpected end of file")

    assert rendered(reporter, capsys, "fn main() {\n  1;\n  2;") == [
        "error: Unexpected end of file",
        "  --> stdin:3",
        "   |",
        "2  |   1;",
        "3  |   2; (EOF)",
        "   |       ^^^",
    ]


def test_render_eof_of_single_line(capsys):
    reporter = Reporter()
    reporter.error("Unexpected end of file")

    lines = rendered(reporter, capsys, "fn")
    assert lines[2:] == ["1  | fn (EOF)", "   |     ^^^"]


def test_hints_hang_under_the_previous_message(capsys):
    reporter = Reporter()
    reporter.error("Expected 0 arguments to function `f`, got 1", Span(12, 16))
    reporter.hint("Function signature is `f() -> void`", Span(12, 16))
    reporter.hint("no location")

    lines = rendered(reporter, capsys, "fn main() { f(1); }")
    assert lines[-2] == "   | " + " " * 12 + "∟ Function signature is `f() -> void`"
    assert lines[-1] == "   = hint: no location"


def test_render_json_lines(capsys):
    reporter = Reporter()
    reporter.constant("Use of constant `x`", Span(4, 5))
    reporter.error("No `main` function found")

    reporter.render_json("let\nx = 1;", "a.tiny")
    first, second = [json.loads(l) for l in capsys.readouterr().err.splitlines()]

    assert first == {
        "kind": "constant", "message": "Use of constant `x`", "file": "a.tiny",
        "lo": 4, "hi": 5, "line": 2, "column": 0,
    }
    assert second["kind"] == "error"
    assert second["line"] is None and second["lo"] is None


def test_crash_reports_and_exits(capsys):
    reporter = Reporter()
    with pytest.raises(SystemExit) as exc:
        reporter.crash("cannot read input file x.tiny")

    assert exc.value.code == 1
    assert reporter.has_errored()
    err = capsys.readouterr().err
    assert "error: cannot read input file x.tiny" in err
    assert "aborted: Unable to continue due to previous errors" in err


def test_span_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        Span(3, 2)


def test_hint_on_another_line_gets_its_own_snippet(capsys):
    source = "fn main() {\n    let x = 1;\n    x = 2;\n    print(x);\n}\n"
    reporter = check(source)

    assert rendered(reporter, capsys, source, "prog.tiny") == [
        "error: Cannot assign twice to immutable variable `x`",
        "  --> prog.tiny:3:4",
        "   |",
        "3  |     x = 2;",
        "   |     ^",
        "  --> prog.tiny:2:8",
        "   |",
        "2  |     let x = 1;",
        "   |         ∟ make this binding mutable: `mut x`",
    ]


def test_hint_on_the_same_line_hangs_under_the_snippet(capsys):
    source = "fn main() { let a = 1; let a = 2; print(a); }"
    reporter = check(source)

    assert rendered(reporter, capsys, source) == [
        "error: Duplicate declaration of variable `a`",
        "  --> stdin:1:27",
        "   |",
        "1  | " + source,
        "   | " + " " * 27 + "^",
        "   | " + " " * 16 + "∟ `a` was first declared here",
    ]


def test_crlf_sources_render_without_carriage_returns(capsys):
    source = "fn main() {\r\n  print(40000);\r\n}\r\n"
    reporter = Reporter()
    reporter.error("out of range", Span(21, 26))

    lines = rendered(reporter, capsys, source)
    assert lines[3] == "2  |   print(40000);"
    assert lines[4] == "   |         ^^^^^"


def test_color_is_opt_in(capsys):
    plain = Reporter()
    plain.error("Division by zero", Span(18, 23))
    assert "\x1b[" not in "".join(rendered(plain, capsys, SOURCE))

    colored = Reporter(color=True)
    colored.error("Division by zero", Span(18, 23))
    lines = rendered(colored, capsys, SOURCE)

    assert lines[0].startswith("\x1b[") and "error" in lines[0]
    assert lines[0].endswith(": Division by zero")
    assert "\x1b[" in lines[3] and lines[3].endswith(" " + SOURCE)
