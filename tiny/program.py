from typing import Optional as Opt

from .ast       import *
from .reporter  import Reporter
from .scope     import Analyzer
from .statement import StatementChecker
from .tools     import Options
from .types     import Type

### PROGRAM ###

# three passes over the top-level declarations, all in the root scope:
#   1. every function signature, so calls may come before definitions
#   2. global `let` declarations, in source order
#   3. function bodies, each in its own scope holding the parameters

FUNC_MAIN = 'main'

class ProgramChecker(StatementChecker):
    def declare_signatures(self, prgm: Program):
        for decl in prgm.functions:
            params = []
            for param in decl.params:
                if not param.type_.is_data_type:
                    self.report(f"Invalid data type `{param.type_}`", param.span)
                params.append(param.type_)

            rettype = Type.VOID if decl.rettype is None else decl.rettype
            self.analyzer.declare_function(decl.name, params, rettype, decl.name_span)

    def check_main(self, prgm: Program):
        main = self.analyzer.lookup_function(FUNC_MAIN)

        if main is None or main.span is None:
            self.report(f"No `{FUNC_MAIN}` function found")
        elif main.param_types or main.return_type != Type.VOID:
            self.report(
                f"`{FUNC_MAIN}` must take no arguments and return `void`",
                main.span,
            )

    def for_function(self, decl: FunctionDecl):
        func = self.analyzer.lookup_function(decl.name)
        if func.span != decl.name_span:
            # a rejected duplicate, the name belongs to another declaration
            return

        with self.analyzer.in_function(decl.name):
            for param in decl.params:
                self.analyzer.declare_variable(
                    param.name,
                    param.type_,
                    param.mutable,
                    param.span,
                )

            for stmt in decl.body.body:
                self.for_statement(stmt)

        if func.return_type != Type.VOID and not self.has_return(decl.body):
            self.report(
                f"Function `{decl.name}` is missing a return statement",
                decl.name_span,
            )

    def for_program(self, prgm: Program):
        self.declare_signatures(prgm)
        self.check_main(prgm)

        for decl in prgm.globals:
            self.for_let(decl)

        for decl in prgm.functions:
            self.for_function(decl)

# --------------------------------------------------------------------
def analyze(prgm: Program, reporter: Reporter, options: Opt[Options] = None) -> Analyzer:
    """
    run the semantic checks over `prgm`, diagnostics go to `reporter`

    the root scope is popped and checked for unused globals last, so the
    returned analyzer holds no scope at all
    """
    analyzer = Analyzer(reporter, options)
    ProgramChecker(analyzer).for_program(prgm)
    analyzer.check_unused(analyzer.pop_scope())
    return analyzer
