from typing import Optional as Opt

from .ast      import *
from .reporter import InternalError
from .scope    import Analyzer
from .types    import Type

### EXPRESSIONS ###

# for_expression() -> Type, the type the expression evaluates to
# a rule never stops at the first problem: both sides of an operator are
# always checked, and an invalid subtree gets a fallback type (int for an
# unknown variable, void for an unknown function) so the enclosing
# expression is still checked

INT_MAX = 32767
INT_MIN = 32768     # magnitude of the smallest value, -32768

class ExpressionChecker:
    def __init__(self, analyzer: Analyzer):
        self.analyzer = analyzer
        self.reporter = analyzer.reporter

    def report(self, msg: str, span: Opt[Span] = None):
        self.reporter.error(msg, span)

    def check_binary_arithmetic(self, expr: Expression, ltype: Type, rtype: Type):
        if ltype != Type.INT or rtype != Type.INT:
            self.report(
                f"Cannot perform arithmetic on types `{ltype}` and `{rtype}`",
                expr.span,
            )

    def check_nonzero_divisor(self, divisor: Expression):
        match divisor:
            case IntExpression(0):
                self.report("Division by zero", divisor.span)

    def check_type_match(self, expected: Type, found: Type, span: Span):
        if expected != found:
            self.report(
                f"Mismatched types: expected `{expected}`, found `{found}`",
                span,
            )
            return False
        return True

    # ----------------------------------------------------------------
    def for_expression(self, expr: Expression) -> Type:
        match expr:
            case IntExpression(value):
                if value > INT_MAX:
                    self.report(
                        f"Value exceeds the maximum for a signed 2-byte integer (max {INT_MAX})",
                        expr.span,
                    )
                return Type.INT

            case NegExpression(IntExpression(value)):
                # -32768 fits even though 32768 does not
                if value > INT_MIN:
                    self.report(
                        f"Value exceeds the minimum for a signed 2-byte integer (min -{INT_MIN})",
                        expr.span,
                    )
                return Type.INT

            case NegExpression(operand):
                type_ = self.for_expression(operand)
                if type_ != Type.INT:
                    self.report(
                        f"Cannot perform arithmetic on type `{type_}`",
                        expr.span,
                    )
                return Type.INT

            case BinaryExpression(operator, left, right):
                ltype = self.for_expression(left)
                rtype = self.for_expression(right)
                self.check_binary_arithmetic(expr, ltype, rtype)

                if operator in (BinaryOp.DIV, BinaryOp.MOD):
                    self.check_nonzero_divisor(right)

                return Type.INT

            case CallExpression(VarExpression(name) as callee, arguments):
                return self.for_call(expr, name, callee, arguments)

            case CallExpression(callee, _):
                self.report(
                    "Composite function names are not supported yet",
                    callee.span,
                )
                return Type.VOID

            case VarExpression(name):
                return self.for_variable(expr, name)

            case AssignExpression(operator, target, value):
                self.for_assign(operator, target, value)
                return Type.VOID

            case _:
                raise InternalError(f"no rule for expression {expr!r}")

    def for_call(self, expr, name, callee, arguments):
        atypes = [self.for_expression(argument) for argument in arguments]

        func = self.analyzer.lookup_function(name)
        if func is None:
            self.report(f"Use of undeclared function `{name}`", callee.span)
            return Type.VOID

        count = len(func.param_types)
        if len(arguments) != count:
            self.report(
                f"Expected {count} argument{'' if count == 1 else 's'} "
                f"to function `{name}`, got {len(arguments)}",
                expr.span,
            )
            self.reporter.hint(
                f"Function signature is `{func.pprint(name)}`",
                expr.span,
            )
        else:
            for ptype, atype, argument in zip(func.param_types, atypes, arguments):
                self.check_type_match(ptype, atype, argument.span)

        return func.return_type

    def for_variable(self, expr, name):
        var = self.analyzer.lookup_variable(name, search_all_scopes = True)
        if var is None:
            self.report(f"Use of undeclared variable `{name}`", expr.span)
            return Type.INT

        if not var.mutable and self.analyzer.options.language_server:
            self.reporter.constant(f"Use of constant `{name}`", expr.span)

        self.analyzer.mark_variable_used(name)
        return var.data_type

    # ----------------------------------------------------------------
    def for_assign(self, operator: AssignOp, target: Expression, value: Expression):
        vtype = self.for_expression(value)

        if operator in (AssignOp.DIV, AssignOp.MOD):
            self.check_nonzero_divisor(value)

        match target:
            case VarExpression(name):
                self.store(name, target.span, vtype, value.span)
            case _:
                self.report("Invalid assignment target", target.span)

    def store(
            self,
            name        : str,
            span        : Span,
            vtype       : Type,
            value_span  : Span,
            initializing: bool = False,
    ):
        """
        the rule shared by every assignment operator and `let` initializers

        in initialization mode the variable was just declared: it may be
        immutable, and the store does not count as a change
        """
        var = self.analyzer.lookup_variable(name, search_all_scopes = True)
        if var is None:
            self.report(f"Use of undeclared variable `{name}`", span)
            return

        if not initializing and not var.mutable:
            self.report(
                f"Cannot assign twice to immutable variable `{name}`",
                span,
            )
            self.reporter.hint(f"make this binding mutable: `mut {name}`", var.span)

        self.check_type_match(var.data_type, vtype, value_span)

        if not initializing:
            self.analyzer.mark_variable_changed(name)
