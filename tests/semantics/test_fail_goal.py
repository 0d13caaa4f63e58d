# tests/semantics/test_fail_goal.py
"""
Tests for dropping goals with failure semantics (``.fail_goal``).

Covers:
- No-op when nothing matches
- Rewriting queued +!g events into -!g
- Failure propagation to the parent goal
- Termination of intentions whose only goal is dropped
- Missing failure plans
- Intentions suspended on events, actions, or by the user
- Several occurrences in one request
- Per-occurrence error isolation
"""

import pytest

from conftest import RecordingListener, add_failure_plan, frame, intention

from bdicore.config.agent_config import IntentionSet
from bdicore.exceptions import MalformedPatternError, StructuralInconsistencyError
from bdicore.semantics.circumstance import ActionExec
from bdicore.semantics.drop import DropOutcome, FailGoalPolicy
from bdicore.semantics.event import Event
from bdicore.semantics.intention import IntentionState
from bdicore.semantics.listeners import FinishState
from bdicore.semantics.locator import InIntentionStack
from bdicore.syntax.terms import lit, parse_literal
from bdicore.syntax.trigger import Trigger, TriggerOperator
from bdicore.syntax.unifier import Unifier

# =============================================================================
# No match
# =============================================================================


class TestNoMatch:
    """Dropping a goal nobody pursues."""

    def test_empty_agent(self, agent, recorder):
        assert agent.fail_goal("go(1,3)") == 0
        assert recorder.calls == []

    def test_state_unchanged(self, agent, recorder):
        agent.circumstance.add_running_intention(intention(frame("+!other", "a")))
        agent.circumstance.add_event(Event(Trigger.parse("+!elsewhere")))
        agent.circumstance.add_event(Event(Trigger.parse("+go(1,3)")))
        before = agent.circumstance.snapshot()

        assert agent.fail_goal("go(1,3)") == 0

        assert agent.circumstance.snapshot() == before
        assert recorder.calls == []

    def test_belief_events_are_not_goals(self, agent):
        event = Event(Trigger.parse("+go(1,3)"))
        agent.circumstance.add_event(event)

        agent.fail_goal("go(1,3)")

        assert event.trigger.operator == TriggerOperator.ADD

    def test_already_failed_event_is_ignored(self, agent):
        event = Event(Trigger.parse("-!go(1,3)"))
        agent.circumstance.add_event(event)

        assert agent.fail_goal("go(1,3)") == 0


# =============================================================================
# Event queue
# =============================================================================


class TestEventQueue:
    """Goals still queued as events."""

    def test_operator_rewritten_in_place(self, agent, recorder):
        event = Event(Trigger.parse("+!go(1,3)"))
        agent.circumstance.add_event(event)

        assert agent.fail_goal("go(X,Y)") == 1

        assert agent.circumstance.events == (event,)
        assert str(event.trigger) == "-!go(1,3)"
        assert recorder.calls == []

    def test_no_intention_mutation(self, agent):
        running = intention(frame("+!patrol", "walk"))
        agent.circumstance.add_running_intention(running)
        agent.circumstance.add_event(Event(Trigger.parse("+!go(1,3)")))

        agent.fail_goal("go(1,3)")

        assert agent.circumstance.running_intentions == (running,)
        assert len(running) == 1
        assert len(agent.circumstance.events) == 1

    def test_subgoal_event_of_suspended_intention(self, agent):
        """A posted subgoal not yet adopted becomes its own failure event."""
        parent = intention(frame("+!get_gold(1,3)", "!go(1,3)", "pick"))
        event = Event(Trigger.parse("+!go(1,3)"), parent)
        agent.circumstance.add_event(event)

        assert agent.fail_goal("go(1,3)") == 1

        assert str(event.trigger) == "-!go(1,3)"
        assert event.intention is parent
        assert len(parent) == 1

    def test_report_outcome_is_none_for_events(self, agent):
        agent.circumstance.add_event(Event(Trigger.parse("+!g")))

        report = agent.drop_goal_report("g")

        assert report.processed == 1
        assert report.entries[0].outcome is None


# =============================================================================
# Intention stacks
# =============================================================================


class TestParentPropagation:
    """A dropped subgoal makes the parent goal fail."""

    @pytest.fixture
    def miner(self, agent):
        add_failure_plan(agent, "-!get_gold(X,Y)")
        i = intention(
            frame("+!get_gold(1,3)", "!go(1,3)", "pick"),
            frame("+!go(1,3)", "move(1,2)", "!go(1,3)"),
        )
        agent.circumstance.add_running_intention(i)
        return i

    def test_parent_failure_event(self, agent, miner):
        assert agent.fail_goal("go(1,3)") == 1

        (event,) = agent.circumstance.events
        assert str(event.trigger) == "-!get_gold(1,3)"
        assert event.intention is miner

    def test_stack_keeps_parent(self, agent, miner):
        parent = miner.frame_at(0)

        agent.fail_goal("go(1,3)")

        assert miner.frames() == (parent,)
        assert parent.plan.position == 0
        assert str(parent.plan.current_step) == "!go(1,3)"

    def test_intention_waits_for_event(self, agent, miner):
        agent.fail_goal("go(1,3)")

        assert miner not in agent.circumstance.running_intentions
        assert miner.state == IntentionState.SUSPENDED
        assert not miner.is_finished()

    def test_outcome(self, agent, miner):
        report = agent.drop_goal_report("go(1,3)")

        assert report.count(DropOutcome.FAILURE_EVENT_GENERATED) == 1

    def test_listener_sees_dropped_goal_before_enqueue(self, agent, miner, recorder):
        agent.fail_goal("go(1,3)")

        assert recorder.calls == [("failed", "+!go(1,3)", 0)]

    def test_pattern_with_variables(self, agent, miner):
        assert agent.fail_goal("go(_,Y)") == 1
        assert str(agent.circumstance.events[0].trigger) == "-!get_gold(1,3)"

    def test_parent_bindings_applied(self, agent):
        add_failure_plan(agent, "-!get_gold(X,Y)")
        parent = frame("+!get_gold(X,Y)", "!go(X,Y)")
        parent.unifier.unifies(parse_literal("p(X,Y)"), parse_literal("p(4,2)"))
        agent.circumstance.add_running_intention(intention(parent, frame("+!go(4,2)", "move")))

        agent.fail_goal("go(4,2)")

        assert str(agent.circumstance.events[0].trigger) == "-!get_gold(4,2)"


class TestStackTruncation:
    """Frames above the dropped goal go with it; frames below stay."""

    def test_frames_above_removed(self, agent):
        add_failure_plan(agent, "-!b")
        frames = [
            frame("+!a", "!b"),
            frame("+!b", "!g", "x"),
            frame("+!g", "!c"),
            frame("+!c", "!d"),
            frame("+!d", "act"),
        ]
        positions = [f.plan.position for f in frames]
        i = intention(*frames)
        agent.circumstance.add_running_intention(i)

        agent.fail_goal("g")

        assert i.frames() == tuple(frames[:2])
        assert [f.plan.position for f in i.frames()] == positions[:2]
        assert str(agent.circumstance.events[0].trigger) == "-!b"

    def test_topmost_matching_frame_is_dropped(self, agent):
        add_failure_plan(agent, "-!g(1)")
        i = intention(frame("+!g(1)", "!g(2)"), frame("+!g(2)", "a"))
        agent.circumstance.add_running_intention(i)

        assert agent.fail_goal("g(N)") == 1

        assert len(i) == 1
        assert str(agent.circumstance.events[0].trigger) == "-!g(1)"


class TestTopLevelTermination:
    """The dropped goal was the only frame of its intention."""

    def test_finalized_without_event(self, agent, recorder):
        i = intention(frame("+!g", "a", "b"))
        agent.circumstance.add_running_intention(i)

        assert agent.fail_goal("g") == 1

        assert agent.circumstance.events == ()
        assert agent.circumstance.running_intentions == ()
        assert i.is_finished()
        assert i.state == IntentionState.FINISHED
        assert recorder.calls == [
            ("failed", "+!g", 0),
            ("finished", "+!g", FinishState.UNACHIEVED, 0),
        ]

    def test_outcome(self, agent):
        agent.circumstance.add_running_intention(intention(frame("+!g", "a")))

        report = agent.drop_goal_report("g")

        assert report.count(DropOutcome.SILENTLY_FINISHED) == 1

    def test_own_failure_plan_generates_event(self, agent, recorder):
        add_failure_plan(agent, "-!g")
        i = intention(frame("+!g", "a"))
        agent.circumstance.add_running_intention(i)

        agent.fail_goal("g")

        (event,) = agent.circumstance.events
        assert str(event.trigger) == "-!g"
        assert event.intention is i
        assert recorder.calls == [("failed", "+!g", 0)]


class TestNoFailurePlan:
    """Without a plan for the synthesized failure the intention is finalized."""

    def test_parent_without_failure_plan(self, agent, recorder):
        add_failure_plan(agent, "-!go(X,Y)")  # not the parent's trigger
        i = intention(frame("+!get_gold(1,3)", "!go(1,3)"), frame("+!go(1,3)", "move"))
        agent.circumstance.add_running_intention(i)

        report = agent.drop_goal_report("go(1,3)")

        assert report.count(DropOutcome.SILENTLY_FINISHED) == 1
        assert report.count(DropOutcome.FAILURE_EVENT_GENERATED) == 0
        assert agent.circumstance.events == ()
        assert i.state == IntentionState.FINISHED
        assert recorder.calls == [
            ("failed", "+!go(1,3)", 0),
            ("finished", "+!go(1,3)", FinishState.UNACHIEVED, 0),
        ]


# =============================================================================
# Suspended intentions
# =============================================================================


class TestSuspendedIntentions:
    """Goals buried in intentions that are not running."""

    def test_pending_action(self, agent):
        add_failure_plan(agent, "-!g0")
        i = intention(frame("+!g0", "!g"), frame("+!g", "move"))
        agent.circumstance.add_pending_action(ActionExec(lit("move"), i))

        assert agent.fail_goal("g") == 1

        assert agent.circumstance.pending_actions == {}
        assert agent.circumstance.events[0].intention is i

    def test_pending_intention_finalized(self, agent):
        i = intention(frame("+!g", "a"))
        agent.circumstance.add_pending_intention("suspended", i)

        assert agent.fail_goal("g") == 1

        assert agent.circumstance.pending_intentions == {}
        assert i.state == IntentionState.FINISHED

    def test_intention_waiting_on_subgoal_event(self, agent):
        add_failure_plan(agent, "-!g0")
        i = intention(frame("+!g0", "!sub"))
        waiting = Event(Trigger.parse("+!sub"), i)
        agent.circumstance.add_event(waiting)

        assert agent.fail_goal("g0") == 1

        (event,) = agent.circumstance.events
        assert event is not waiting
        assert str(event.trigger) == "-!g0"
        assert event.intention is i

    def test_intention_waiting_on_event_finalized(self, agent):
        i = intention(frame("+!g0", "!sub"))
        agent.circumstance.add_event(Event(Trigger.parse("+!sub"), i))

        agent.fail_goal("g0")

        assert agent.circumstance.events == ()
        assert i.state == IntentionState.FINISHED


# =============================================================================
# Several occurrences
# =============================================================================


class TestMultipleOccurrences:
    def test_each_intention_processed(self, agent, recorder):
        add_failure_plan(agent, "-!patrol")
        first = intention(frame("+!patrol", "!g"), frame("+!g", "a"))
        second = intention(frame("+!g", "b"))
        agent.circumstance.add_running_intention(first)
        agent.circumstance.add_running_intention(second)

        report = agent.drop_goal_report("g")

        assert report.processed == 2
        assert [e.outcome for e in report.entries] == [
            DropOutcome.FAILURE_EVENT_GENERATED,
            DropOutcome.SILENTLY_FINISHED,
        ]
        assert len(first) == 1
        assert second.is_finished()
        assert [str(e.trigger) for e in agent.circumstance.events] == ["-!patrol"]

    def test_event_and_intention(self, agent):
        queued = Event(Trigger.parse("+!g"))
        agent.circumstance.add_event(queued)
        agent.circumstance.add_running_intention(intention(frame("+!g", "a")))

        assert agent.fail_goal("g") == 2
        assert str(queued.trigger) == "-!g"

    def test_bindings_do_not_leak_between_occurrences(self, agent):
        agent.circumstance.add_running_intention(intention(frame("+!g(1)", "a")))
        agent.circumstance.add_running_intention(intention(frame("+!g(2)", "a")))

        assert agent.fail_goal("g(X)") == 2
        assert agent.circumstance.running_intentions == ()


# =============================================================================
# Errors
# =============================================================================


class ExplodingPolicy(FailGoalPolicy):
    """Fails for one intention, delegates for the others."""

    def __init__(self, victim):
        self.victim = victim

    def on_intention_match(self, context, occurrence, pattern):
        if occurrence.intention is self.victim:
            raise RuntimeError("boom")
        return super().on_intention_match(context, occurrence, pattern)


class TestErrors:
    def test_malformed_pattern_rejected(self, agent):
        i = intention(frame("+!g", "a"))
        agent.circumstance.add_running_intention(i)

        for pattern in ("X", "42", "g(", '"g"'):
            with pytest.raises(MalformedPatternError):
                agent.fail_goal(pattern)

        assert len(i) == 1

    def test_failure_is_isolated(self, agent):
        broken = intention(frame("+!g", "a"))
        fine = intention(frame("+!g", "a"))
        agent.circumstance.add_running_intention(broken)
        agent.circumstance.add_running_intention(fine)

        report = agent.drop_goal_report("g", ExplodingPolicy(broken))

        assert report.processed == 1
        assert len(report.errors) == 1
        assert isinstance(report.errors[0], RuntimeError)
        assert fine.is_finished()
        assert len(broken) == 1

    def test_structural_inconsistency_leaves_intention(self, agent):
        i = intention(frame("+!g0", "!g"), frame("+!g", "a"))
        occurrence = InIntentionStack(i, 5, IntentionSet.RUNNING)

        with pytest.raises(StructuralInconsistencyError):
            FailGoalPolicy().on_intention_match(agent.context, occurrence, parse_literal("g"))

        assert len(i) == 2

    def test_frame_no_longer_matching(self, agent):
        i = intention(frame("+!g0", "!g"), frame("+!g", "a"))
        occurrence = InIntentionStack(i, 0, IntentionSet.RUNNING, unifier=Unifier())

        with pytest.raises(StructuralInconsistencyError) as exc_info:
            FailGoalPolicy().on_intention_match(agent.context, occurrence, parse_literal("g"))

        assert exc_info.value.intention_id == i.id
        assert len(i) == 2

    def test_listener_error_is_isolated(self, agent):
        class Broken(RecordingListener):
            def goal_finished(self, trigger, state):
                raise ValueError("listener bug")

        agent.listeners.add(Broken())
        agent.circumstance.add_running_intention(intention(frame("+!g", "a")))
        agent.circumstance.add_running_intention(intention(frame("+!g", "b")))

        report = agent.drop_goal_report("g")

        assert len(report.errors) == 2
        assert report.processed == 0


class TestDropInIntention:
    def test_no_match(self, agent):
        i = intention(frame("+!g", "a"))

        outcome = agent.dropper.drop_in_intention(i, "other", FailGoalPolicy())

        assert outcome == DropOutcome.NO_MATCH
        assert len(i) == 1

    def test_match(self, agent):
        add_failure_plan(agent, "-!g0")
        i = intention(frame("+!g0", "!g"), frame("+!g", "a"))
        agent.circumstance.add_running_intention(i)

        outcome = agent.dropper.drop_in_intention(i, "g", FailGoalPolicy())

        assert outcome == DropOutcome.FAILURE_EVENT_GENERATED
        assert agent.circumstance.running_intentions == ()
