# tests/syntax/test_trigger.py
"""
Tests for trigger parsing and predicates.
"""

import pytest

from bdicore.exceptions import SyntaxParseError
from bdicore.syntax.terms import NumberTerm, Var, parse_literal
from bdicore.syntax.trigger import Trigger, TriggerOperator, TriggerType
from bdicore.syntax.unifier import Unifier


class TestParse:
    @pytest.mark.parametrize(
        "text,operator,trigger_type",
        [
            ("+!go(1,3)", TriggerOperator.ADD, TriggerType.ACHIEVE),
            ("-!go(1,3)", TriggerOperator.DEL, TriggerType.ACHIEVE),
            ("+?pos(X)", TriggerOperator.ADD, TriggerType.TEST),
            ("-at(home)", TriggerOperator.DEL, TriggerType.BELIEF),
            ("^!g[state(failed)]", TriggerOperator.GOAL_STATE, TriggerType.ACHIEVE),
        ],
    )
    def test_parse(self, text, operator, trigger_type):
        trigger = Trigger.parse(text)
        assert trigger.operator == operator
        assert trigger.type == trigger_type
        assert str(trigger) == text

    @pytest.mark.parametrize("text", ["", "!g", "go", "+!", "+!Go"])
    def test_errors(self, text):
        with pytest.raises(SyntaxParseError):
            Trigger.parse(text)


class TestPredicates:
    def test_achieve_addition(self):
        trigger = Trigger.achieve(parse_literal("g"))
        assert trigger.is_goal() and trigger.is_achieve() and trigger.is_addition()
        assert not trigger.is_failure()

    def test_failure(self):
        assert Trigger.parse("-!g").is_failure()
        assert Trigger.parse("-?g").is_failure()
        assert not Trigger.parse("-g").is_failure()

    def test_failure_trigger_keeps_literal(self):
        trigger = Trigger.parse("+!go(1,3)[source(self)]")
        failure = trigger.failure_trigger()
        assert str(failure) == "-!go(1,3)[source(self)]"
        assert trigger.operator == TriggerOperator.ADD


class TestValueSemantics:
    def test_equality_and_hash(self):
        assert Trigger.parse("+!g(1)") == Trigger.parse("+!g(1)")
        assert Trigger.parse("+!g(1)") != Trigger.parse("-!g(1)")
        assert len({Trigger.parse("+!g"), Trigger.parse("+!g")}) == 1

    def test_clone_is_independent(self):
        trigger = Trigger.parse("+!g")
        copy = trigger.clone()
        copy.operator = TriggerOperator.DEL
        assert str(trigger) == "+!g"
        assert str(copy) == "-!g"

    def test_capply(self):
        un = Unifier()
        un.unifies(Var("X"), NumberTerm(1))
        assert str(Trigger.parse("+!go(X,Y)").capply(un)) == "+!go(1,Y)"
