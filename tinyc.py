#! /usr/bin/env python3

import sys

from tiny.parser   import Parser
from tiny.program  import analyze
from tiny.reporter import Reporter
from tiny.tools    import Tools

def render(reporter, options, source):
    if options.language_server:
        reporter.render_json(source, options.input)
    else:
        reporter.render(source, options.input)

def main(argv = None):
    """
    usage:
    python3 tinyc.py [--language-server] [--verbose] [--color] <filename>.tiny

    checks the program and reports every diagnostic found,
    exits with status 1 if any of them is an error
    """
    # preliminary objects
    reporter    = Reporter()
    tools       = Tools(reporter)

    # parse args
    options          = tools.parseargs(argv)
    reporter.verbose = options.verbose
    reporter.color   = options.color
    parser           = Parser(reporter)

    reporter.checkpoint("reading")
    source = tools.readsource(options.input)

    # source to ast
    reporter.checkpoint("parsing")
    prgm = parser.parse(source)

    # semantic analysis
    if reporter.checkpoint("analysis") and prgm is not None:
        analyze(prgm, reporter, options)

    render(reporter, options, source)

    if reporter.has_errored():
        if not options.language_server:
            reporter.abort()
        return 1

    reporter.checkpoint("end")
    return 0


if __name__ == "__main__":
    sys.exit(main())
