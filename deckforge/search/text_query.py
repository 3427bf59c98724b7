"""
Free-text query parsing.

Turns a free-text query into an expression tree over full-text terms:

    flying or reach            -> AnyOf(Term(flying), Term(reach))
    draw a card                -> AllOf(Term(draw), Term(card))
    (flying or reach) not haste
                               -> AllOf(AnyOf(...), Not(Term(haste)))
    "this or that"             -> AllOf(Term(this), Term(or), Term(that))

Bare `and`, `or`, `not` (any case) are operators. Adjacent terms are ANDed
and `or` binds looser than AND. Double quotes make a phrase literal, which is
the only way to search for the word "or" itself.
"""

import re

from deckforge.search.expressions import AllOf, AnyOf, Expression, Not, Term

_STRIP_CHARS = re.compile(r"[^\w\s+/-]")
_LEXEME = re.compile(r'\(|\)|"[^"]*"?|[^\s()"]+')

OPERATORS = frozenset({"and", "or", "not"})


def tokenize(text: str | None) -> list[str]:
    """
    Split text into index tokens.

    Lower-cases, replaces anything other than word characters, whitespace,
    "+", "-" and "/" with spaces, and drops tokens of one character.
    "+1/+1 counter" keeps "+1/+1".
    """
    if not text:
        return []
    return [token for token in _STRIP_CHARS.sub(" ", text.lower()).split() if len(token) > 1]


class _Parser:
    def __init__(self, text: str):
        self._lexemes = _LEXEME.findall(text)
        self._pos = 0

    def _peek(self) -> str | None:
        return self._lexemes[self._pos] if self._pos < len(self._lexemes) else None

    def _peek_operator(self) -> str | None:
        lexeme = self._peek()
        if lexeme is not None and lexeme.lower() in OPERATORS:
            return lexeme.lower()
        return None

    def _advance(self) -> str:
        lexeme = self._lexemes[self._pos]
        self._pos += 1
        return lexeme

    def parse(self) -> Expression | None:
        expression = self._parse_or()
        # Stray closing parentheses: keep parsing what follows
        while self._peek() is not None:
            self._advance()
            rest = self._parse_or()
            if rest is not None:
                expression = rest if expression is None else AllOf((expression, rest))
        return expression

    def _parse_or(self) -> Expression | None:
        branches: list[Expression] = []
        branch = self._parse_and()
        if branch is not None:
            branches.append(branch)
        while self._peek_operator() == "or":
            self._advance()
            branch = self._parse_and()
            if branch is not None:
                branches.append(branch)
        if not branches:
            return None
        return branches[0] if len(branches) == 1 else AnyOf(tuple(branches))

    def _parse_and(self) -> Expression | None:
        items: list[Expression] = []
        while (lexeme := self._peek()) is not None and lexeme != ")":
            operator = self._peek_operator()
            if operator == "or":
                break
            if operator == "and":
                self._advance()
                continue
            item = self._parse_unary()
            if item is not None:
                items.append(item)
        if not items:
            return None
        return items[0] if len(items) == 1 else AllOf(tuple(items))

    def _parse_unary(self) -> Expression | None:
        if self._peek_operator() == "not":
            self._advance()
            if self._peek() is None or self._peek_operator() == "or":
                return None
            operand = self._parse_unary()
            return Not(operand) if operand is not None else None

        lexeme = self._advance()
        if lexeme == "(":
            inner = self._parse_or()
            if self._peek() == ")":
                self._advance()
            return inner
        if lexeme.startswith('"'):
            return _terms(tokenize(lexeme.strip('"')))
        return _terms(tokenize(lexeme))


def _terms(tokens: list[str]) -> Expression | None:
    if not tokens:
        return None
    if len(tokens) == 1:
        return Term(tokens[0])
    return AllOf(tuple(Term(token) for token in tokens))


def parse_text_query(text: str | None) -> Expression:
    """
    Parse free text into an expression tree.

    Text without any usable term matches no cards.
    """
    expression = _Parser(text or "").parse()
    return expression if expression is not None else AnyOf()
