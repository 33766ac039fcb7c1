import argparse
import dataclasses as dc
import os
import sys

from typing import Optional as Opt

@dc.dataclass
class Options:
    input           : Opt[str] = None
    language_server : bool     = False
    verbose         : bool     = False
    color           : bool     = False

class Tools:
    EXTENSION = ".tiny"

    def __init__(self, reporter):
        self.reporter = reporter

    def parseargs(self, argv = None) -> Options:
        """
        return the options for this run, the input file is mandatory
        """
        parser = argparse.ArgumentParser(
            prog        = os.path.basename(sys.argv[0]),
            description = "check a Tiny source file for semantic errors",
        )

        parser.add_argument('input', help = f'input file ({self.EXTENSION})')
        parser.add_argument(
            '--language-server',
            action  = 'store_true',
            help    = 'report reads of constants and print diagnostics as JSON lines',
        )
        parser.add_argument(
            '-v', '--verbose',
            action  = 'store_true',
            help    = 'print the compiler phases as they run',
        )
        parser.add_argument(
            '--color',
            action  = 'store_true',
            help    = 'color the severity tags and gutters of the diagnostics',
        )

        aout = parser.parse_args(argv)

        if os.path.splitext(aout.input)[1].lower() != self.EXTENSION:
            self.reporter.info(
                f"expected a '{self.EXTENSION}' file, got {aout.input}"
            )

        return Options(
            input           = aout.input,
            language_server = aout.language_server,
            verbose         = aout.verbose,
            color           = aout.color,
        )

    def readsource(self, filename: str) -> str:
        """
        return the contents of `filename`, crash if it cannot be read
        """
        try:
            with open(filename, "r") as stream:
                return stream.read()

        except OSError as e:
            self.reporter.crash(f"cannot read input file {filename}: {e}")
