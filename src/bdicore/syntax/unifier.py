# src/bdicore/syntax/unifier.py
"""
Structural unification of terms.

A :class:`Unifier` is a binding set from variable names to terms. Calling
:meth:`Unifier.unifies` either extends the bindings and returns True, or
leaves them unchanged and returns False.

Annotations are matched as a subset: every annotation of the first literal
must unify with some annotation of the second, so the pattern ``go(1,3)``
matches the goal ``go(1,3)[source(self)]`` but not the other way around.
"""

from __future__ import annotations

from typing import Dict, Optional

from .terms import Literal, NumberTerm, StringTerm, Term, Var


class Unifier:
    """Mutable set of variable bindings."""

    def __init__(self, bindings: Optional[Dict[str, Term]] = None) -> None:
        self._bindings: Dict[str, Term] = dict(bindings or {})

    def clone(self) -> Unifier:
        return Unifier(self._bindings)

    def get(self, name: str) -> Optional[Term]:
        """Return the fully dereferenced value of variable ``name``, if bound."""
        value = self.deref(Var(name))
        return None if value.is_var() else value

    def deref(self, term: Term) -> Term:
        while isinstance(term, Var) and term.name in self._bindings:
            term = self._bindings[term.name]
        return term

    def bind(self, var: Var, value: Term) -> None:
        self._bindings[var.name] = value

    def unifies(self, first: Term, second: Term) -> bool:
        """Unify two terms; bindings are only kept when unification succeeds."""
        trial = dict(self._bindings)
        if self._unify(first, second):
            return True
        self._bindings = trial
        return False

    def _unify(self, first: Term, second: Term) -> bool:
        first = self.deref(first)
        second = self.deref(second)

        if isinstance(first, Var) and isinstance(second, Var):
            if first.name != second.name:
                self.bind(first, second)
            return True
        if isinstance(first, Var):
            if self._occurs(first, second):
                return False
            self.bind(first, second)
            return True
        if isinstance(second, Var):
            if self._occurs(second, first):
                return False
            self.bind(second, first)
            return True

        if isinstance(first, (NumberTerm, StringTerm)) or isinstance(second, (NumberTerm, StringTerm)):
            return first == second

        if isinstance(first, Literal) and isinstance(second, Literal):
            if (
                first.functor != second.functor
                or first.arity != second.arity
                or first.negated != second.negated
            ):
                return False
            for a, b in zip(first.terms, second.terms):
                if not self._unify(a, b):
                    return False
            return self._unify_annots(first, second)

        return False

    def _unify_annots(self, first: Literal, second: Literal) -> bool:
        for annot in first.annots:
            for candidate in second.annots:
                saved = dict(self._bindings)
                if self._unify(annot, candidate):
                    break
                self._bindings = saved
            else:
                return False
        return True

    def _occurs(self, var: Var, term: Term) -> bool:
        term = self.deref(term)
        if isinstance(term, Var):
            return term.name == var.name
        if isinstance(term, Literal):
            return any(self._occurs(var, t) for t in term.terms + term.annots)
        return False

    def __len__(self) -> int:
        return len(self._bindings)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Unifier) and self._bindings == other._bindings

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}={v}" for k, v in sorted(self._bindings.items()))
        return "{" + pairs + "}"
