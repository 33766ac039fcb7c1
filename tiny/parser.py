import dataclasses as dc
import ply.lex
import ply.yacc

from typing import Optional as Opt

from .ast       import *
from .lexer     import Lexer
from .reporter  import Reporter
from .types     import Type

class Parser:
    tokens      = Lexer.tokens
    start       = 'program'
    precedence  = (
        ('right'    , 'EQ', 'PLUS_EQ', 'DASH_EQ', 'STAR_EQ', 'SLASH_EQ', 'PCENT_EQ'),
        ('nonassoc' , 'CMP_EQ', 'CMP_NEQ', 'CMP_LT', 'CMP_LEQ', 'CMP_GT', 'CMP_GEQ'),
        ('left'     , 'PLUS', 'DASH'            ),
        ('left'     , 'STAR', 'SLASH', 'PCENT'  ),
        ('right'    , 'UMINUS'                  ),
        ('left'     , 'LPAREN'                  ),
    )

    def __init__(self, reporter: Reporter):
        self.reporter   = reporter
        self.lexer      = Lexer(self.reporter)
        self.parser     = ply.yacc.yacc(
            module      = self,
            write_tables= False,
            debug       = False,
            errorlog    = ply.yacc.NullLogger(),
        )

    def parse(self, source: str) -> Opt[Program]:
        self.lexer.lexer.lineno = 1
        return self.parser.parse(source, lexer = self.lexer.lexer)

    # spans -------------------------------------------------------------
    # a terminal spans its raw text, a nonterminal the span of its node

    def _lo(self, p, i):
        sym = p.slice[i]
        if isinstance(sym, ply.lex.LexToken):
            return sym.lexpos
        return p[i].span.lo

    def _hi(self, p, i):
        sym = p.slice[i]
        if isinstance(sym, ply.lex.LexToken):
            return sym.lexpos + len(sym.value)
        return p[i].span.hi

    def span(self, p, first = 1, last = None):
        last = len(p) - 1 if last is None else last
        return Span(self._lo(p, first), self._hi(p, last))

    # expressions -------------------------------------------------------

    def p_name(self, p):
        """expr : IDENT"""
        p[0] = VarExpression(
            name        = p[1],
            span        = self.span(p),
        )

    def p_number(self, p):
        """expr : NUMBER"""
        p[0] = IntExpression(
            value       = int(p[1]),
            span        = self.span(p),
        )

    def p_unary_operation(self, p):
        """expr : DASH expr %prec UMINUS"""
        p[0] = NegExpression(
            operand     = p[2],
            span        = self.span(p),
        )

    def p_binary_operation(self, p):
        """expr : expr PLUS     expr
                | expr DASH     expr
                | expr STAR     expr
                | expr SLASH    expr
                | expr PCENT    expr
                | expr CMP_EQ   expr
                | expr CMP_NEQ  expr
                | expr CMP_LT   expr
                | expr CMP_LEQ  expr
                | expr CMP_GT   expr
                | expr CMP_GEQ  expr"""
        p[0] = BinaryExpression(
            operator    = BinaryOp(p[2]),
            left        = p[1],
            right       = p[3],
            span        = self.span(p),
        )

    def p_assignment(self, p):
        """expr : expr EQ       expr
                | expr PLUS_EQ  expr
                | expr DASH_EQ  expr
                | expr STAR_EQ  expr
                | expr SLASH_EQ expr
                | expr PCENT_EQ expr"""
        p[0] = AssignExpression(
            operator    = AssignOp(p[2]),
            target      = p[1],
            value       = p[3],
            span        = self.span(p),
        )

    def p_call(self, p):
        """expr : expr LPAREN args RPAREN"""
        p[0] = CallExpression(
            callee      = p[1],
            arguments   = p[3],
            span        = self.span(p),
        )

    def p_args(self, p):
        """args :
                | arglist"""
        p[0] = [] if len(p) == 1 else p[1]

    def p_arglist(self, p):
        """arglist : expr
                   | arglist COMMA expr"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1]
            p[0].append(p[3])

    def p_parentheses(self, p):
        """expr : LPAREN expr RPAREN"""
        p[0] = dc.replace(p[2], span = self.span(p))

    # types -------------------------------------------------------------

    def p_type_int(self, p):
        """type : INT"""
        p[0] = Type.INT

    def p_type_void(self, p):
        """type : VOID"""
        p[0] = Type.VOID

    # statements --------------------------------------------------------

    def p_let(self, p):
        """let : LET mutopt IDENT typeopt EQ expr SEMICOLON"""
        p[0] = LetStatement(
            name        = p[3],
            mutable     = p[2],
            type_       = p[4],
            init        = p[6],
            name_span   = self.span(p, 3, 3),
            span        = self.span(p),
        )

    def p_mutopt(self, p):
        """mutopt :
                  | MUT"""
        p[0] = len(p) == 2

    def p_typeopt(self, p):
        """typeopt :
                   | COLON type"""
        p[0] = None if len(p) == 1 else p[2]

    def p_expr_statement(self, p):
        """stmt : expr SEMICOLON"""
        p[0] = ExprStatement(
            expression  = p[1],
            span        = self.span(p),
        )

    def p_block(self, p):
        """block : LBRACE stmts RBRACE"""
        p[0] = BlockStatement(
            body        = p[2],
            span        = self.span(p),
        )

    def p_ifelse(self, p):
        """ifelse : IF expr block ifrest"""
        p[0] = IfStatement(
            condition   = p[2],
            iftrue      = p[3],
            iffalse     = p[4],
            span        = self.span(p, 1, 3 if p[4] is None else 4),
        )

    def p_ifrest(self, p):
        """ifrest :
                  | ELSE ifelse
                  | ELSE block"""
        if len(p) == 1:
            p[0] = None
        else:
            p[0] = p[2]

    def p_while(self, p):
        """while : WHILE expr block"""
        p[0] = WhileStatement(
            condition   = p[2],
            body        = p[3],
            span        = self.span(p),
        )

    def p_for(self, p):
        """for : FOR IDENT IN expr DOTDOT expr block"""
        p[0] = ForStatement(
            name        = p[2],
            name_span   = self.span(p, 2, 2),
            start       = p[4],
            stop        = p[6],
            body        = p[7],
            span        = self.span(p),
        )

    def p_jump(self, p):
        """jump : BREAK SEMICOLON
                | CONTINUE SEMICOLON"""
        if p[1] == "break":
            p[0] = BreakStatement(span = self.span(p))
        else:
            p[0] = ContinueStatement(span = self.span(p))

    def p_return(self, p):
        """return : RETURN SEMICOLON
                  | RETURN expr SEMICOLON"""
        p[0] = ReturnStatement(
            value       = p[2] if len(p) == 4 else None,
            span        = self.span(p),
        )

    def p_stmt(self, p):
        """stmt : let
                | block
                | ifelse
                | while
                | for
                | jump
                | return"""
        p[0] = p[1]

    def p_stmts(self, p):
        """stmts :
                 | stmts stmt"""
        if len(p) == 1:
            p[0] = []
        else:
            p[0] = p[1]
            p[0].append(p[2])

    # declarations ------------------------------------------------------

    def p_param(self, p):
        """param : mutopt IDENT COLON type"""
        p[0] = Param(
            name        = p[2],
            type_       = p[4],
            mutable     = p[1],
            span        = self.span(p, 2, 2),
        )

    def p_params(self, p):
        """params :
                  | paramlist"""
        p[0] = [] if len(p) == 1 else p[1]

    def p_paramlist(self, p):
        """paramlist : param
                     | paramlist COMMA param"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1]
            p[0].append(p[3])

    def p_rettype(self, p):
        """rettype :
                   | ARROW type"""
        p[0] = None if len(p) == 1 else p[2]

    def p_function(self, p):
        """function : FN IDENT LPAREN params RPAREN rettype block"""
        p[0] = FunctionDecl(
            name        = p[2],
            name_span   = self.span(p, 2, 2),
            params      = p[4],
            rettype     = p[6],
            body        = p[7],
            span        = self.span(p),
        )

    def p_topdecl(self, p):
        """topdecl : function
                   | let"""
        p[0] = p[1]

    def p_topdecls(self, p):
        """topdecls :
                    | topdecls topdecl"""
        if len(p) == 1:
            p[0] = []
        else:
            p[0] = p[1]
            p[0].append(p[2])

    def p_program(self, p):
        """program : topdecls"""
        p[0] = Program(p[1])

    def p_error(self, p):
        if p:
            self.reporter.error(
                f"Unexpected token `{p.value}`",
                Span(p.lexpos, p.lexpos + len(str(p.value))),
            )
        else:
            self.reporter.error("Unexpected end of file")
