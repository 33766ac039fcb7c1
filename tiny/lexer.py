import ply.lex
import re

from .ast import Span

class Lexer:
    keywords = {
        x: x.upper() for x in (
            'fn'       ,
            'let'      ,
            'mut'      ,
            'int'      ,
            'void'     ,
            'if'       ,
            'else'     ,
            'while'    ,
            'for'      ,
            'in'       ,
            'break'    ,
            'continue' ,
            'return'   ,
        )
    }

    tokens = (
        'IDENT' ,               # : str
        'NUMBER',               # : str, converted by the parser

        # Punctuation
        'LPAREN'       ,
        'RPAREN'       ,
        'LBRACE'       ,
        'RBRACE'       ,
        'COLON'        ,
        'SEMICOLON'    ,
        'COMMA'        ,
        'ARROW'        ,
        'DOTDOT'       ,

        'DASH'         ,
        'PCENT'        ,
        'PLUS'         ,
        'SLASH'        ,
        'STAR'         ,

        'EQ'           ,
        'PLUS_EQ'      ,
        'DASH_EQ'      ,
        'STAR_EQ'      ,
        'SLASH_EQ'     ,
        'PCENT_EQ'     ,

        'CMP_EQ'       ,
        'CMP_NEQ'      ,
        'CMP_LT'       ,
        'CMP_LEQ'      ,
        'CMP_GT'       ,
        'CMP_GEQ'      ,
    ) + tuple(keywords.values())

    t_LPAREN    = re.escape('(')
    t_RPAREN    = re.escape(')')
    t_LBRACE    = re.escape('{')
    t_RBRACE    = re.escape('}')
    t_COLON     = re.escape(':')
    t_SEMICOLON = re.escape(';')
    t_COMMA     = re.escape(',')
    t_ARROW     = re.escape('->')
    t_DOTDOT    = re.escape('..')

    t_DASH      = re.escape('-')
    t_PCENT     = re.escape('%')
    t_PLUS      = re.escape('+')
    t_SLASH     = re.escape('/')
    t_STAR      = re.escape('*')

    t_EQ        = re.escape('=')
    t_PLUS_EQ   = re.escape('+=')
    t_DASH_EQ   = re.escape('-=')
    t_STAR_EQ   = re.escape('*=')
    t_SLASH_EQ  = re.escape('/=')
    t_PCENT_EQ  = re.escape('%=')

    t_CMP_EQ    = re.escape('==')
    t_CMP_NEQ   = re.escape('!=')
    t_CMP_LT    = re.escape('<')
    t_CMP_LEQ   = re.escape('<=')
    t_CMP_GT    = re.escape('>')
    t_CMP_GEQ   = re.escape('>=')

    t_ignore = ' \t\r'          # Ignore all whitespaces
    t_ignore_comment = r'//.*'

    def __init__(self, reporter):
        self.reporter = reporter
        self.lexer    = ply.lex.lex(module = self)

    def tokenize(self, source: str):
        self.lexer.input(source)
        self.lexer.lineno = 1
        return list(iter(self.lexer.token, None))

    def t_newline(self, t):
        r'\n+'
        t.lexer.lineno += len(t.value)

    def t_IDENT(self, t):
        r'[a-zA-Z_][a-zA-Z0-9_]*'
        if t.value in self.keywords:
            t.type  = self.keywords[t.value]
        return t

    def t_NUMBER(self, t):
        r'\d+'
        return t

    def t_error(self, t):
        self.reporter.error(
            f"Unexpected character `{t.value[0]}`",
            Span(t.lexpos, t.lexpos + 1),
        )
        t.lexer.skip(1)
