from .ast        import *
from .expression import ExpressionChecker
from .reporter   import InternalError
from .types      import Type

### STATEMENTS ###

# for_statement() -> None, statements only leave diagnostics and scope changes
# every block, branch and loop body gets its own scope through
# analyzer.scope(), which pops it again on every exit path

class StatementChecker(ExpressionChecker):
    def for_condition(self, expr: Expression):
        self.check_type_match(Type.INT, self.for_expression(expr), expr.span)

    def for_let(self, stmt: LetStatement):
        data_type = Type.INT

        if stmt.type_ is not None:
            if stmt.type_.is_data_type:
                data_type = stmt.type_
            else:
                self.report(f"Invalid data type `{stmt.type_}`", stmt.span)

        # the initializer cannot see the name it initializes
        vtype = self.for_expression(stmt.init)

        var = self.analyzer.declare_variable(
            stmt.name,
            data_type,
            stmt.mutable,
            stmt.name_span,
        )
        if var is not None:
            self.store(
                stmt.name,
                stmt.name_span,
                vtype,
                stmt.init.span,
                initializing = True,
            )

    def for_return(self, stmt: ReturnStatement):
        current = self.analyzer.current_function()
        if current is None:
            self.report("`return` outside of a function", stmt.span)
            if stmt.value is not None:
                self.for_expression(stmt.value)
            return

        func, name = current

        if stmt.value is None:
            if func.return_type != Type.VOID:
                self.report(
                    f"Function `{name}` must return a value of type `{func.return_type}`",
                    stmt.span,
                )
            return

        vtype = self.for_expression(stmt.value)
        if func.return_type == Type.VOID:
            self.report(
                f"Cannot return a value from function `{name}` returning `void`",
                stmt.value.span,
            )
        else:
            self.check_type_match(func.return_type, vtype, stmt.value.span)

    # ----------------------------------------------------------------
    def for_statement(self, stmt: Statement):
        match stmt:
            case LetStatement():
                self.for_let(stmt)

            case ExprStatement(expression):
                self.for_expression(expression)

            case BlockStatement(body):
                self.for_block(body)

            case IfStatement(condition, iftrue, iffalse):
                self.for_condition(condition)
                self.for_statement(iftrue)
                if iffalse is not None:
                    self.for_statement(iffalse)

            case WhileStatement(condition, body):
                self.for_condition(condition)
                with self.analyzer.in_loop():
                    self.for_statement(body)

            case ForStatement(name, name_span, start, stop, body):
                self.for_condition(start)
                self.for_condition(stop)
                with self.analyzer.scope(), self.analyzer.in_loop():
                    self.analyzer.declare_variable(name, Type.INT, False, name_span)
                    self.for_statement(body)

            case BreakStatement() | ContinueStatement():
                if self.analyzer.loop_depth <= 0:
                    keyword = "break" if isinstance(stmt, BreakStatement) else "continue"
                    self.report(f"`{keyword}` outside of a loop", stmt.span)

            case ReturnStatement():
                self.for_return(stmt)

            case _:
                raise InternalError(f"no rule for statement {stmt!r}")

    def for_block(self, block: list[Statement]):
        with self.analyzer.scope():
            for stmt in block:
                self.for_statement(stmt)

    # ----------------------------------------------------------------
    def has_return(self, stmt: Statement) -> bool:
        """
        whether every path through `stmt` ends in a return
        """
        match stmt:
            case ReturnStatement():
                return True

            case IfStatement(_, iftrue, iffalse):
                return \
                    iffalse is not None and \
                    self.has_return(iftrue) and \
                    self.has_return(iffalse)

            case BlockStatement(body):
                return any(self.has_return(s) for s in body)

            case _:
                return False
