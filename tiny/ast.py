import dataclasses as dc
import enum

from typing import Optional as Opt

from .types import Type

### AST CLASSES ###

# every node carries the span of source text it covers
# spans are half-open character ranges [lo, hi) into one source string
# the checkers in expression.py / statement.py dispatch on these with `match`

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class Span:
    lo: int
    hi: int

    def __post_init__(self):
        if self.lo > self.hi:
            raise ValueError(f"invalid span [{self.lo}, {self.hi})")

    @property
    def width(self):
        return self.hi - self.lo

# --------------------------------------------------------------------
class BinaryOp(enum.Enum):
    ADD     = '+'
    SUB     = '-'
    MUL     = '*'
    DIV     = '/'
    MOD     = '%'
    LT      = '<'
    LE      = '<='
    GT      = '>'
    GE      = '>='
    EQ      = '=='
    NE      = '!='

    def __str__(self):
        return self.value

class AssignOp(enum.Enum):
    ASSIGN  = '='
    ADD     = '+='
    SUB     = '-='
    MUL     = '*='
    DIV     = '/='
    MOD     = '%='

    def __str__(self):
        return self.value

# --------------------------------------------------------------------
@dc.dataclass
class AST:
    span: Span = dc.field(kw_only = True)

# --------------------------------------------------------------------
@dc.dataclass
class Expression(AST):
    pass

@dc.dataclass
class IntExpression(Expression):
    value: int

@dc.dataclass
class VarExpression(Expression):
    name: str

@dc.dataclass
class NegExpression(Expression):
    operand: Expression

@dc.dataclass
class BinaryExpression(Expression):
    operator: BinaryOp
    left    : Expression
    right   : Expression

@dc.dataclass
class CallExpression(Expression):
    callee   : Expression
    arguments: list[Expression]

@dc.dataclass
class AssignExpression(Expression):
    operator: AssignOp
    target  : Expression
    value   : Expression

# --------------------------------------------------------------------
@dc.dataclass
class Statement(AST):
    pass

@dc.dataclass
class LetStatement(Statement):
    name     : str
    mutable  : bool
    type_    : Opt[Type]
    init     : Expression
    name_span: Span

@dc.dataclass
class ExprStatement(Statement):
    expression: Expression

@dc.dataclass
class BlockStatement(Statement):
    body: list[Statement]

@dc.dataclass
class IfStatement(Statement):
    condition: Expression
    iftrue   : BlockStatement
    iffalse  : Opt[Statement]   # IfStatement | BlockStatement | None

@dc.dataclass
class WhileStatement(Statement):
    condition: Expression
    body     : BlockStatement

@dc.dataclass
class ForStatement(Statement):
    name     : str
    name_span: Span
    start    : Expression
    stop     : Expression
    body     : BlockStatement

@dc.dataclass
class BreakStatement(Statement):
    pass

@dc.dataclass
class ContinueStatement(Statement):
    pass

@dc.dataclass
class ReturnStatement(Statement):
    value: Opt[Expression]

# --------------------------------------------------------------------
@dc.dataclass
class Param(AST):
    name   : str
    type_  : Type
    mutable: bool = False

@dc.dataclass
class FunctionDecl(AST):
    name     : str
    name_span: Span
    params   : list[Param]
    rettype  : Opt[Type]
    body     : BlockStatement

TopDecl = FunctionDecl | LetStatement

@dc.dataclass
class Program:
    decls: list[TopDecl]

    @property
    def functions(self):
        return [d for d in self.decls if isinstance(d, FunctionDecl)]

    @property
    def globals(self):
        return [d for d in self.decls if isinstance(d, LetStatement)]
