"""
fns - Precedence Climbing Parser
Converts a token stream into a typed AST.

Binary operators are folded by precedence climbing: every operand on the
right of an operator is parsed with a minimum precedence one above that
operator, which makes all binary operators left-associative. A
parenthesised expression restarts the climb at the lowest level.
"""

from typing import List, Optional

from .ast_nodes import (
    ProgramNode, LetNode, ConstNode, ExpressionStatementNode,
    NumberNode, StringNode, BooleanNode, NoneNode, IdentifierNode,
    UnaryOpNode, BinaryOpNode, AssignmentNode, ObjectEntry, ObjectNode,
    MemberAccessNode, ASTNode
)
from .errors import FnsError
from .lexer import Token, TokenType, tokenize


# Lowest binds loosest.
BINARY_PRECEDENCE = {
    TokenType.OR:    1,
    TokenType.AND:   2,
    TokenType.EQ:    3,
    TokenType.NEQ:   3,
    TokenType.LT:    4,
    TokenType.LTE:   4,
    TokenType.GT:    4,
    TokenType.GTE:   4,
    TokenType.PLUS:  5,
    TokenType.MINUS: 5,
    TokenType.STAR:  6,
    TokenType.SLASH: 6,
}

LOWEST_PRECEDENCE = 1

# Bound on grouping, prefix operators, right operands and assignment chains,
# so overly deep input is reported as a ParseError.
MAX_NESTING = 100

UNARY_OPERATORS = {TokenType.PLUS, TokenType.MINUS, TokenType.BANG}

# Tokens that may begin a statement.
STATEMENT_START = {
    TokenType.LET, TokenType.CONST,
    TokenType.NUMBER, TokenType.STRING, TokenType.BOOLEAN, TokenType.NONE,
    TokenType.IDENTIFIER, TokenType.LPAREN, TokenType.LBRACE,
} | UNARY_OPERATORS


def _describe(tok: Token) -> str:
    if tok.type == TokenType.EOF:
        return "end of input"
    if tok.type == TokenType.STRING:
        return f'{tok.type.name} ("{tok.value}")'
    return f"{tok.type.name} ({tok.value!r})"


class ParseError(FnsError):
    def __init__(self, message: str, line: int, column: int,
                 expected: Optional[str] = None, found: Optional[str] = None):
        super().__init__(message, line, column)
        self.expected = expected
        self.found = found


class Parser:
    def __init__(self, tokens: List[Token]):
        self._tokens = list(tokens)
        if not self._tokens or self._tokens[-1].type != TokenType.EOF:
            end = self._tokens[-1] if self._tokens else None
            self._tokens.append(Token(
                TokenType.EOF, '',
                end.line if end else 1,
                end.column + len(end.value) if end else 1,
            ))
        self._pos = 0
        self._depth = 0

    # ------------------------------------------------------------------ helpers

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _expect(self, ttype: TokenType, what: Optional[str] = None) -> Token:
        tok = self._peek()
        if tok.type != ttype:
            expected = what or ttype.name
            raise ParseError(
                f"Expected {expected} but got {_describe(tok)}",
                tok.line, tok.column,
                expected=expected, found=_describe(tok),
            )
        return self._advance()

    def _match(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _nested(self, parse_fn, *args, levels: int = 1) -> ASTNode:
        """Run parse_fn one or more nesting levels deeper, enforcing MAX_NESTING."""
        self._depth += levels
        try:
            if self._depth > MAX_NESTING:
                tok = self._peek()
                raise ParseError(
                    f"Expression nested too deeply (more than {MAX_NESTING} levels)",
                    tok.line, tok.column,
                    expected=f"at most {MAX_NESTING} levels of nesting",
                    found=_describe(tok),
                )
            return parse_fn(*args)
        finally:
            self._depth -= levels

    @staticmethod
    def _at(node: ASTNode, tok: Token) -> ASTNode:
        node.line = tok.line
        node.column = tok.column
        return node

    # ------------------------------------------------------------------ public

    def parse(self) -> ProgramNode:
        stmts = []
        while not self._match(TokenType.EOF):
            stmts.append(self._parse_statement())
            tok = self._peek()
            if tok.type != TokenType.EOF and tok.type not in STATEMENT_START:
                raise ParseError(
                    f"Unexpected token {_describe(tok)} after statement",
                    tok.line, tok.column,
                    expected="statement or end of input", found=_describe(tok),
                )
        node = ProgramNode(statements=stmts)
        node.line = 1
        node.column = 1
        return node

    # ------------------------------------------------------------------ statements

    def _parse_statement(self) -> ASTNode:
        tok = self._peek()

        if tok.type == TokenType.LET:
            return self._parse_declaration(LetNode)
        if tok.type == TokenType.CONST:
            return self._parse_declaration(ConstNode)

        expr = self._parse_expression()
        return self._at(ExpressionStatementNode(expr=expr), tok)

    def _parse_declaration(self, node_cls) -> ASTNode:
        keyword_tok = self._advance()                         # let / const
        name_tok = self._expect(TokenType.IDENTIFIER, "identifier")
        if not self._match(TokenType.ASSIGN):
            tok = self._peek()
            raise ParseError(
                f"Missing initializer for '{name_tok.value}': "
                f"expected '=' but got {_describe(tok)}",
                tok.line, tok.column,
                expected="'='", found=_describe(tok),
            )
        self._advance()                                       # =
        value = self._parse_expression()
        return self._at(node_cls(name=name_tok.value, value=value), keyword_tok)

    # ------------------------------------------------------------------ expressions

    def _parse_expression(self) -> ASTNode:
        start_tok = self._peek()
        target = self._parse_binary(LOWEST_PRECEDENCE)

        if self._match(TokenType.ASSIGN):
            assign_tok = self._advance()
            if not isinstance(target, IdentifierNode):
                raise ParseError(
                    "Invalid assignment target: only a name can be assigned",
                    assign_tok.line, assign_tok.column,
                    expected="identifier before '='", found=_describe(start_tok),
                )
            # Right-associative: a = b = c
            value = self._nested(self._parse_expression)
            node = AssignmentNode(name=target.name, value=value)
            node.line = target.line
            node.column = target.column
            return node

        return target

    def _parse_binary(self, min_precedence: int) -> ASTNode:
        left = self._parse_unary()

        while True:
            op_tok = self._peek()
            precedence = BINARY_PRECEDENCE.get(op_tok.type)
            if precedence is None or precedence < min_precedence:
                break
            self._advance()
            right = self._nested(self._parse_binary, precedence + 1)
            left = self._at(BinaryOpNode(left=left, op=op_tok.value, right=right), op_tok)

        return left

    def _parse_unary(self) -> ASTNode:
        op_toks = []
        while self._peek().type in UNARY_OPERATORS:
            op_toks.append(self._advance())
        if not op_toks:
            return self._parse_postfix()

        # Each prefix operator wraps the operand in one more node
        expr = self._nested(self._parse_postfix, levels=len(op_toks))
        for op_tok in reversed(op_toks):
            expr = self._at(UnaryOpNode(op=op_tok.value, operand=expr), op_tok)
        return expr

    def _parse_postfix(self) -> ASTNode:
        expr = self._parse_primary()

        while self._match(TokenType.DOT):
            self._advance()
            prop_tok = self._expect(TokenType.IDENTIFIER, "property name")
            expr = self._at(MemberAccessNode(object=expr, property=prop_tok.value), prop_tok)

        return expr

    def _parse_primary(self) -> ASTNode:
        tok = self._peek()

        # Parenthesised expression
        if tok.type == TokenType.LPAREN:
            self._advance()
            expr = self._nested(self._parse_expression)
            self._expect(TokenType.RPAREN, "')'")
            return expr

        if tok.type == TokenType.LBRACE:
            return self._parse_object()

        if tok.type == TokenType.NUMBER:
            self._advance()
            return self._at(NumberNode(value=float(tok.value)), tok)

        if tok.type == TokenType.STRING:
            self._advance()
            return self._at(StringNode(value=tok.value), tok)

        if tok.type == TokenType.BOOLEAN:
            self._advance()
            return self._at(BooleanNode(value=tok.value == "true"), tok)

        if tok.type == TokenType.NONE:
            self._advance()
            return self._at(NoneNode(), tok)

        if tok.type == TokenType.IDENTIFIER:
            self._advance()
            return self._at(IdentifierNode(name=tok.value), tok)

        raise ParseError(
            f"Unexpected token {_describe(tok)} in expression",
            tok.line, tok.column,
            expected="expression", found=_describe(tok),
        )

    def _parse_object(self) -> ObjectNode:
        open_tok = self._expect(TokenType.LBRACE)
        entries = []
        seen = set()

        if not self._match(TokenType.RBRACE):
            while True:
                key_tok = self._expect(TokenType.IDENTIFIER, "object key")
                if key_tok.value in seen:
                    raise ParseError(
                        f"Duplicate key '{key_tok.value}' in object literal",
                        key_tok.line, key_tok.column,
                        expected="unique key", found=_describe(key_tok),
                    )
                seen.add(key_tok.value)
                self._expect(TokenType.COLON, "':'")
                value = self._nested(self._parse_expression)
                entries.append(self._at(ObjectEntry(key=key_tok.value, value=value), key_tok))
                if not self._match(TokenType.COMMA):
                    break
                self._advance()
                # No trailing comma: a key must follow
                if self._match(TokenType.RBRACE):
                    tok = self._peek()
                    raise ParseError(
                        "Trailing comma in object literal",
                        tok.line, tok.column,
                        expected="object key", found=_describe(tok),
                    )

        self._expect(TokenType.RBRACE, "'}'")
        return self._at(ObjectNode(entries=entries), open_tok)


def parse(source: str) -> ProgramNode:
    """Tokenize and parse fns source text into a ProgramNode."""
    return Parser(tokenize(source)).parse()
