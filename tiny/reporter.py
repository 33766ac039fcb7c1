import dataclasses as dc
import enum
import json
import sys
import threading

from typing import Optional as Opt

from termcolor import colored

from .ast import Span

### REPORTER ###

# collects diagnostics in detection order and renders them once the
# whole program has been walked
# nothing here checks span bounds: a span is only read at render time
# info() is the exception, it is printed straight away and never stored

class Kind(enum.Enum):
    ERROR    = 'error'
    WARNING  = 'warning'
    HINT     = 'hint'
    INFO     = 'info'
    CONSTANT = 'constant'   # editor-only marker for reads of immutables

    def __str__(self):
        return self.value

@dc.dataclass(frozen = True)
class Diagnostic:
    kind: Kind
    text: str
    span: Opt[Span] = None

    def __repr__(self):
        where = f" at [{self.span.lo}, {self.span.hi})" if self.span else ""
        return f"{self.kind}: {self.text}{where}"

class InternalError(Exception):
    """
    a broken invariant of the checker itself, never a problem in user code
    """

# --------------------------------------------------------------------
def locate(source: str, lo: int) -> tuple[int, int]:
    """
    1-based line and 0-based column of offset `lo` in `source`
    """
    line_begin = source.rfind("\n", 0, lo) + 1
    return source.count("\n", 0, lo) + 1, lo - line_begin

def _line_bounds(source: str, span: Span) -> tuple[int, int]:
    line_begin = source.rfind("\n", 0, span.lo) + 1
    line_end   = source.find("\n", span.hi)
    if line_end < 0:
        line_end = len(source)
    return line_begin, line_end

# --------------------------------------------------------------------
class Reporter():
    """
    report errors, warnings and hints against one source text
    """
    COLORS = {
        Kind.ERROR   : "red",
        Kind.WARNING : "yellow",
        Kind.HINT    : "cyan",
        Kind.INFO    : "green",
    }

    def __init__(self, stream = None, verbose: bool = False, color: bool = False):
        self._stream  = stream
        self._lock    = threading.Lock()
        self._log     = []
        self._errored = False
        self.verbose  = verbose
        self.color    = color
        self.section  = None

    @property
    def stream(self):
        return self._stream or sys.stderr

    @property
    def diagnostics(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._log)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is Kind.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is Kind.WARNING]

    def _print(self, text: str = ""):
        print(text, file = self.stream)

    # ----------------------------------------------------------------
    def record(self, kind: Kind, text: str, span: Opt[Span] = None):
        diagnostic = Diagnostic(kind, text, span)
        with self._lock:
            self._log.append(diagnostic)
            if kind is Kind.ERROR:
                self._errored = True
        return diagnostic

    def error(self, text, span = None):
        return self.record(Kind.ERROR, text, span)

    def warning(self, text, span = None):
        return self.record(Kind.WARNING, text, span)

    def hint(self, text, span = None):
        return self.record(Kind.HINT, text, span)

    def constant(self, text, span = None):
        return self.record(Kind.CONSTANT, text, span)

    def info(self, text: str):
        self._print(f"{self._tag(Kind.INFO)}: {text}")

    def has_errored(self) -> bool:
        with self._lock:
            return self._errored

    def checkpoint(self, section = None):
        self.section = section
        if self.verbose and section:
            self.info(f"entering {section}")
        return not self.has_errored()

    def abort(self):
        self._print("aborted: Unable to continue due to previous errors")

    def crash(self, errstr: str):
        """
        report an error that leaves nothing to check and stop the run
        """
        self.record(Kind.ERROR, errstr)
        self._print(f"{self._tag(Kind.ERROR)}: {errstr}")
        self.abort()
        raise SystemExit(1)

    # ----------------------------------------------------------------
    def _paint(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return colored(text, color, attrs = ["bold"], force_color = True)

    def _tag(self, kind: Kind) -> str:
        return self._paint(str(kind), self.COLORS.get(kind, "white"))

    def _gutter(self, prefix = "") -> str:
        return self._paint(f"{prefix:<3}|", "blue")

    def render(self, source: str, filename: Opt[str] = None):
        # a hint hangs under the snippet printed before it as long as both
        # sit on the same line, otherwise it gets a snippet of its own
        shown = None
        for diagnostic in self.diagnostics:
            match diagnostic.kind:
                case Kind.HINT:
                    shown = self._render_hint(diagnostic, source, filename, shown)
                case _:
                    self._print(f"{self._tag(diagnostic.kind)}: {diagnostic.text}")
                    if diagnostic.span is None:
                        self._render_eof(source, filename)
                    else:
                        self._render_context(source, filename, diagnostic.span)
                    shown = diagnostic.span

    def render_json(self, source: str, filename: Opt[str] = None):
        for diagnostic in self.diagnostics:
            entry = {
                "kind"    : str(diagnostic.kind),
                "message" : diagnostic.text,
                "file"    : filename,
                "lo"      : None,
                "hi"      : None,
                "line"    : None,
                "column"  : None,
            }
            if diagnostic.span is not None:
                line, col = locate(source, diagnostic.span.lo)
                entry.update(
                    lo      = diagnostic.span.lo,
                    hi      = diagnostic.span.hi,
                    line    = line,
                    column  = col,
                )
            self._print(json.dumps(entry))

    def _render_hint(self, diagnostic, source, filename, shown):
        if diagnostic.span is None:
            self._print(f"   = {self._tag(Kind.HINT)}: {diagnostic.text}")
            return shown

        line_no, col = locate(source, diagnostic.span.lo)
        if shown is None or locate(source, shown.lo)[0] != line_no:
            self._render_snippet(source, filename, diagnostic.span)
            shown = diagnostic.span

        self._print(f"{self._gutter()} {' ' * col}∟ {diagnostic.text}")
        return shown

    def _render_eof(self, source, filename):
        # span-less diagnostics point at the end of the file
        lines = source.splitlines()
        total = len(lines)

        self._print(f"  {self._paint('-->', 'blue')} {filename or 'stdin'}:{total}")
        self._print(self._gutter())

        if total > 1:
            self._print(f"{self._gutter(total - 1)} {lines[-2]}")

        if total > 0:
            self._print(f"{self._gutter(total)} {lines[-1]} (EOF)")
            self._print(f"{self._gutter()} {' ' * len(lines[-1])}  ^^^")
        else:
            self._print(f"{self._gutter(total)} (EOF)")
            self._print(f"{self._gutter()}  ^^^")

    def _render_snippet(self, source, filename, span) -> list[str]:
        line_no, col = locate(source, span.lo)
        line_begin, line_end = _line_bounds(source, span)

        self._print(f"  {self._paint('-->', 'blue')} {filename or 'stdin'}:{line_no}:{col}")
        self._print(self._gutter())

        lines = [l.rstrip("\r") for l in source[line_begin:line_end].split("\n")]
        total = len(lines)

        self._print(f"{self._gutter(line_no)} {lines[0]}")
        if total > 2:
            self._print(f"{self._gutter()}    ...")
        if total > 1:
            self._print(f"{self._gutter(line_no + total - 1)} {lines[-1]}")
        return lines

    def _render_context(self, source, filename, span):
        lines = self._render_snippet(source, filename, span)
        _, col = locate(source, span.lo)

        if len(lines) == 1 and span.width > 0:
            width = span.width
        else:
            longest = max(len(lines[0]), len(lines[-1]))
            width   = max(1, longest - col)

        self._print(f"{self._gutter()} {' ' * col}{'^' * width}")
