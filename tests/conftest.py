import pytest

from tiny.parser   import Parser
from tiny.program  import analyze
from tiny.reporter import Kind, Reporter
from tiny.scope    import Analyzer
from tiny.tools    import Options


def parse(source, reporter=None):
    reporter = reporter or Reporter()
    prgm = Parser(reporter).parse(source)
    assert not reporter.has_errored(), reporter.diagnostics
    return prgm


def check(source, language_server=False):
    """Parse and analyze `source`, returning the reporter that collected everything."""
    reporter = Reporter()
    prgm = parse(source, reporter)
    analyze(prgm, reporter, Options(language_server=language_server))
    return reporter


def texts(reporter, kind=Kind.ERROR):
    return [d.text for d in reporter.diagnostics if d.kind is kind]


@pytest.fixture
def reporter():
    return Reporter()


@pytest.fixture
def analyzer(reporter):
    return Analyzer(reporter)
