import contextlib as cl
import dataclasses as dc

from typing import Optional as Opt

from .ast      import Span
from .reporter import Reporter, InternalError
from .tools    import Options
from .types    import Type, FuncSig, VarSig

### SCOPES ###

# one Scope per lexical block, the Analyzer keeps them as a stack with
# the innermost scope last
# every lookup walks the stack from the innermost scope outwards and
# stops at the first binding, so inner declarations hide outer ones

@dc.dataclass
class Scope:
    functions: dict[str, FuncSig] = dc.field(default_factory = dict)
    variables: dict[str, VarSig]  = dc.field(default_factory = dict)

# --------------------------------------------------------------------
class Analyzer:
    BUILTINS = {
        'print': ((Type.INT,), Type.VOID),
    }

    def __init__(self, reporter: Reporter, options: Opt[Options] = None):
        self.reporter   = reporter
        self.options    = options or Options()
        self.scopes     = []
        self.func_stack = []
        self.loop_depth = 0

        self.push_scope()
        for name, (params, rettype) in self.BUILTINS.items():
            self.declare_function(name, params, rettype)

    def report(self, msg: str, span: Opt[Span] = None):
        self.reporter.error(msg, span)

    # ----------------------------------------------------------------
    def push_scope(self):
        self.scopes.append(Scope())

    def pop_scope(self) -> Scope:
        if not self.scopes:
            raise InternalError("pop_scope() called with no scope left")
        return self.scopes.pop()

    @cl.contextmanager
    def scope(self):
        self.push_scope()
        try:
            yield self.scopes[-1]
        finally:
            self.check_unused(self.pop_scope())

    @cl.contextmanager
    def in_loop(self):
        self.loop_depth += 1
        try:
            yield self
        finally:
            self.loop_depth -= 1

    @cl.contextmanager
    def in_function(self, name: str):
        self.func_stack.append(name)
        try:
            with self.scope() as scope:
                yield scope
        finally:
            self.func_stack.pop()

    def check_unused(self, scope: Scope):
        for name, var in scope.variables.items():
            if var.used_count == 0 and not name.startswith('_'):
                self.reporter.warning(f"Unused variable `{name}`", var.span)
            if var.mutable and var.changed_count == 0:
                self.reporter.warning(
                    f"Variable `{name}` does not need to be mutable",
                    var.span,
                )

    # ----------------------------------------------------------------
    def declare_function(
            self,
            name        : str,
            param_types,
            return_type : Type,
            span        : Opt[Span] = None,
    ) -> Opt[FuncSig]:
        scope = self.scopes[-1]

        if name in scope.functions:
            self.report(f"Duplicate declaration of function `{name}`", span)
            previous = scope.functions[name].span
            if previous is not None:
                self.reporter.hint(f"`{name}` was first declared here", previous)
            return None

        sig = FuncSig(return_type, tuple(param_types), span)
        scope.functions[name] = sig
        return sig

    def lookup_function(self, name: str) -> Opt[FuncSig]:
        for scope in reversed(self.scopes):
            if name in scope.functions:
                return scope.functions[name]
        return None

    def current_function(self) -> Opt[tuple[FuncSig, str]]:
        if not self.func_stack:
            return None
        name = self.func_stack[-1]
        return self.lookup_function(name), name

    # ----------------------------------------------------------------
    def declare_variable(
            self,
            name     : str,
            data_type: Type,
            mutable  : bool,
            span     : Span,
    ) -> Opt[VarSig]:
        scope = self.scopes[-1]

        if name in scope.variables:
            self.report(f"Duplicate declaration of variable `{name}`", span)
            self.reporter.hint(
                f"`{name}` was first declared here",
                scope.variables[name].span,
            )
            return None

        var = VarSig(data_type, mutable, span)
        scope.variables[name] = var
        return var

    def lookup_variable(self, name: str, search_all_scopes: bool = True) -> Opt[VarSig]:
        if not search_all_scopes:
            return self.scopes[-1].variables.get(name)

        for scope in reversed(self.scopes):
            if name in scope.variables:
                return scope.variables[name]
        return None

    def mark_variable_used(self, name: str) -> Opt[VarSig]:
        var = self.lookup_variable(name)
        if var is not None:
            var.used_count += 1
        return var

    def mark_variable_changed(self, name: str) -> Opt[VarSig]:
        var = self.lookup_variable(name)
        if var is not None:
            var.changed_count += 1
        return var
