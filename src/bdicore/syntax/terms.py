# src/bdicore/syntax/terms.py
"""
Terms and literals of the agent language.

Only what the goal-lifecycle core needs is modelled: variables, numbers,
strings and structured literals (an atom is a literal without arguments),
optionally strongly negated and carrying annotations such as
``state(failed)``.

Example:
    >>> lit = parse_literal("go(1,X)[source(self)]")
    >>> lit.functor, lit.arity
    ('go', 2)
    >>> str(lit)
    'go(1,X)[source(self)]'
"""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Union

from ..exceptions import SyntaxParseError

if TYPE_CHECKING:
    from .unifier import Unifier

_anonymous_ids = itertools.count(1)


class Term:
    """Base class of every term."""

    def is_var(self) -> bool:
        return False

    def is_literal(self) -> bool:
        return False

    def is_ground(self) -> bool:
        return True

    def capply(self, unifier: Unifier) -> Term:
        """Return a copy of this term with the unifier's bindings applied."""
        return self


@dataclass(frozen=True)
class Var(Term):
    name: str

    def is_var(self) -> bool:
        return True

    def is_ground(self) -> bool:
        return False

    def capply(self, unifier: Unifier) -> Term:
        value = unifier.deref(self)
        if value is self or value.is_var():
            return value
        return value.capply(unifier)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class NumberTerm(Term):
    value: float

    def __str__(self) -> str:
        if float(self.value).is_integer():
            return str(int(self.value))
        return str(self.value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NumberTerm) and float(self.value) == float(other.value)

    def __hash__(self) -> int:
        return hash(float(self.value))


@dataclass(frozen=True)
class StringTerm(Term):
    value: str

    def __str__(self) -> str:
        return '"' + self.value.replace('"', '\\"') + '"'


@dataclass(frozen=True)
class Literal(Term):
    """
    A (possibly negated, possibly annotated) structured term.

    Attributes:
        functor: Name of the literal.
        terms: Arguments.
        annots: Annotations, written between brackets after the arguments.
        negated: Strong negation (``~``).
    """

    functor: str
    terms: tuple[Term, ...] = ()
    annots: tuple[Term, ...] = ()
    negated: bool = False

    @property
    def arity(self) -> int:
        return len(self.terms)

    def is_literal(self) -> bool:
        return True

    def is_atom(self) -> bool:
        return not self.terms and not self.annots and not self.negated

    def is_ground(self) -> bool:
        return all(t.is_ground() for t in itertools.chain(self.terms, self.annots))

    def capply(self, unifier: Unifier) -> Literal:
        return Literal(
            self.functor,
            tuple(t.capply(unifier) for t in self.terms),
            tuple(a.capply(unifier) for a in self.annots),
            self.negated,
        )

    def with_annots(self, *annots: Term) -> Literal:
        """Return a copy whose annotations are ``annots`` (replacing existing ones)."""
        return Literal(self.functor, self.terms, tuple(annots), self.negated)

    def without_annots(self) -> Literal:
        return Literal(self.functor, self.terms, (), self.negated)

    def __str__(self) -> str:
        text = ("~" if self.negated else "") + self.functor
        if self.terms:
            text += "(" + ",".join(str(t) for t in self.terms) + ")"
        if self.annots:
            text += "[" + ",".join(str(a) for a in self.annots) + "]"
        return text


def atom(name: str) -> Literal:
    return Literal(name)


def lit(functor: str, *args: Union[Term, int, float, str]) -> Literal:
    """
    Build a literal from Python values.

    Strings starting with an uppercase letter or ``_`` become variables, other
    strings become atoms; numbers become number terms.

    >>> str(lit("go", 1, "X"))
    'go(1,X)'
    """
    return Literal(functor, tuple(_to_term(a) for a in args))


def _to_term(value: Union[Term, int, float, str]) -> Term:
    if isinstance(value, Term):
        return value
    if isinstance(value, bool):
        return Literal("true" if value else "false")
    if isinstance(value, (int, float)):
        return NumberTerm(value)
    if value[:1].isupper() or value[:1] == "_":
        return Var(value)
    return Literal(value)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

_TOKEN = re.compile(
    r"""\s*(?:
        (?P<number>-?\d+(?:\.\d+)?)
      | (?P<string>"(?:[^"\\]|\\.)*")
      | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
      | (?P<punct>[()\[\],~])
    )""",
    re.VERBOSE,
)


@dataclass
class _Tokens:
    text: str
    items: list[tuple[str, str]] = field(default_factory=list)
    pos: int = 0

    @classmethod
    def scan(cls, text: str) -> _Tokens:
        tokens = cls(text)
        index = 0
        stripped = text.rstrip()
        while index < len(stripped):
            match = _TOKEN.match(stripped, index)
            if match is None or match.end() == index:
                raise SyntaxParseError(text, f"Unexpected character at offset {index}.")
            kind = match.lastgroup or ""
            tokens.items.append((kind, match.group(kind)))
            index = match.end()
        return tokens

    def peek(self) -> tuple[str, str] | None:
        return self.items[self.pos] if self.pos < len(self.items) else None

    def next(self) -> tuple[str, str]:
        token = self.peek()
        if token is None:
            raise SyntaxParseError(self.text, "Unexpected end of input.")
        self.pos += 1
        return token

    def expect(self, value: str) -> None:
        kind, text = self.next()
        if text != value:
            raise SyntaxParseError(self.text, f"Expected '{value}' but found '{text}'.")

    def accept(self, value: str) -> bool:
        token = self.peek()
        if token is not None and token[1] == value:
            self.pos += 1
            return True
        return False


def _parse_term(tokens: _Tokens) -> Term:
    token = tokens.peek()
    if token is None:
        raise SyntaxParseError(tokens.text, "Unexpected end of input.")
    kind, text = token
    if kind == "number":
        tokens.next()
        return NumberTerm(float(text) if "." in text else int(text))
    if kind == "string":
        tokens.next()
        return StringTerm(text[1:-1].replace('\\"', '"'))
    if kind == "name" and (text[0].isupper() or text[0] == "_"):
        tokens.next()
        if text == "_":
            return Var(f"_{next(_anonymous_ids)}")
        return Var(text)
    return _parse_literal(tokens)


def _parse_term_list(tokens: _Tokens, closing: str) -> tuple[Term, ...]:
    items = [_parse_term(tokens)]
    while tokens.accept(","):
        items.append(_parse_term(tokens))
    tokens.expect(closing)
    return tuple(items)


def _parse_literal(tokens: _Tokens) -> Literal:
    negated = tokens.accept("~")
    kind, text = tokens.next()
    if kind != "name" or not text[0].islower():
        raise SyntaxParseError(tokens.text, f"Expected a literal but found '{text}'.")
    terms: tuple[Term, ...] = ()
    annots: tuple[Term, ...] = ()
    if tokens.accept("("):
        terms = _parse_term_list(tokens, ")")
    if tokens.accept("["):
        annots = _parse_term_list(tokens, "]")
    return Literal(text, terms, annots, negated)


def parse_term(text: str) -> Term:
    """Parse any term (variable, number, string or literal)."""
    tokens = _Tokens.scan(text)
    term = _parse_term(tokens)
    if tokens.peek() is not None:
        raise SyntaxParseError(text, f"Trailing input '{tokens.peek()[1]}'.")
    return term


def parse_literal(text: str) -> Literal:
    """Parse a literal such as ``~at(home)[source(self)]``."""
    term = parse_term(text)
    if not isinstance(term, Literal):
        raise SyntaxParseError(text, "Text is not a literal.")
    return term


def iter_vars(term: Term) -> Iterator[Var]:
    """Yield every variable occurring in ``term``, depth first."""
    if isinstance(term, Var):
        yield term
    elif isinstance(term, Literal):
        for sub in itertools.chain(term.terms, term.annots):
            yield from iter_vars(sub)
