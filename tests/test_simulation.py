import pytest

from nfa import State, Transition, compile
from simulation import (
    Simulation,
    closure_ids,
    epsilon_closure,
    has_accept,
    initial_history,
    matches,
    step,
    step_ids,
)


@pytest.mark.parametrize("pattern, text, expected", [
    ("", "", True),
    ("", "a", False),
    ("a", "a", True),
    ("a", "", False),
    ("a", "aa", False),
    ("a*", "", True),
    ("a*", "a", True),
    ("a*", "aaaa", True),
    ("a*", "b", False),
    ("a(b|c)*d", "abccbd", True),
    ("a(b|c)*d", "ad", True),
    ("a(b|c)*d", "abc", False),
    ("a+", "", False),
    ("a+", "a", True),
    ("a+", "aaa", True),
    ("ab?c", "ac", True),
    ("ab?c", "abc", True),
    ("ab?c", "abbc", False),
    ("(a|b)*abb", "babaabb", True),
    ("(a|b)*abb", "abab", False),
    (r"a\*", "a*", True),
    (r"a\*", "aa", False),
    (r"\e", "", True),
    (r"a\eb", "ab", True),
    ("(0|1)+", "0110", True),
])
def test_acceptance(pattern, text, expected):
    assert matches(compile(pattern), text) is expected


def test_initial_history_follows_epsilon_from_start():
    nfa = compile("a*")
    assert {s.id for s in initial_history(nfa)} == {0, 2, 3}


def test_closure_contains_seed_and_is_idempotent():
    nfa = compile("a(b|c)*d")
    for state in nfa.states:
        closure = epsilon_closure([state], nfa)
        assert state in closure
        assert epsilon_closure(closure, nfa) == closure


def test_closure_of_empty_set_is_empty():
    nfa = compile("a*")
    assert epsilon_closure([], nfa) == frozenset()
    assert step([], "a", nfa) == frozenset()


def test_closure_returns_canonical_states():
    nfa = compile("a")
    closure = epsilon_closure([State(1)], nfa)
    assert [s.is_accept for s in closure] == [True]


def test_step_without_matching_transition_is_empty():
    nfa = compile("ab")
    assert step(initial_history(nfa), "b", nfa) == frozenset()


def test_step_is_pure():
    nfa = compile("a|b")
    active = initial_history(nfa)
    assert step(active, "a", nfa) == step(active, "a", nfa)
    assert has_accept(step(active, "b", nfa))


def test_history_is_seeded_with_initial_closure():
    nfa = compile("ab")
    sim = Simulation(nfa, "ab")
    assert sim.history == (initial_history(nfa),)
    assert sim.index == 0


def test_forward_and_backward():
    sim = Simulation(compile("ab"), "ab")
    assert sim.step_forward()
    assert sim.active_state_ids() == {1, 2}
    assert sim.step_forward()
    assert not sim.step_forward()
    assert sim.is_accepted()
    assert sim.step_backward()
    assert sim.index == 1
    assert len(sim.history) == 3
    assert not sim.is_accepted()


def test_backward_at_start_is_noop():
    sim = Simulation(compile("a"), "a")
    assert not sim.step_backward()
    assert sim.index == 0


def test_replay_is_identical():
    sim = Simulation(compile("a(b|c)*d"), "abcbd")
    sim.run_to_end()
    first_pass = sim.history
    while sim.index > 2:
        sim.step_backward()
    assert sim.history == first_pass
    sim.run_to_end()
    assert sim.history == first_pass
    assert [sim.active_state_ids(i) for i in range(len(first_pass))] == \
        [frozenset(s.id for s in entry) for entry in first_pass]


def test_rejected_early_stays_empty():
    sim = Simulation(compile("ab"), "xab")
    sim.step_forward()
    assert sim.is_stuck
    sim.run_to_end()
    assert all(not entry for entry in sim.history[1:])
    assert not sim.is_accepted()


def test_acceptance_only_counts_at_full_length():
    sim = Simulation(compile("a*"), "aa")
    sim.step_forward()
    assert has_accept(sim.current)
    assert not sim.is_accepted()
    sim.step_forward()
    assert sim.is_accepted()


def test_reset_truncates_history():
    sim = Simulation(compile("a*"), "aaa")
    sim.run_to_end()
    sim.reset()
    assert sim.index == 0
    assert len(sim.history) == 1


def test_set_text_discards_computed_steps():
    sim = Simulation(compile("ab"), "ab")
    sim.run_to_end()
    sim.set_text("ax")
    assert len(sim.history) == 1
    assert sim.run_to_end() is False
    assert sim.is_stuck


def test_fired_transitions():
    sim = Simulation(compile("ab"), "ab")
    assert sim.fired_transitions() == ()
    sim.step_forward()
    assert set(sim.fired_transitions()) == {Transition(0, 1, "a"), Transition(1, 2, None)}
    sim.step_forward()
    assert sim.fired_transitions() == (Transition(2, 3, "b"),)
    assert sim.fired_transitions(1) == sim.fired_transitions(1)


def test_id_level_step_matches_state_step():
    nfa = compile("a(b|c)*d")
    active = initial_history(nfa)
    ids = frozenset(s.id for s in active)
    for char in "abcd":
        active = step(active, char, nfa)
        ids = step_ids(ids, char, nfa.transitions)
        assert ids == frozenset(s.id for s in active)


def test_closure_ids_over_transition_list():
    transitions = [Transition(0, 1, None), Transition(1, 2, None), Transition(2, 3, "a")]
    assert closure_ids([0], transitions) == {0, 1, 2}
    assert closure_ids([], transitions) == frozenset()
    assert step_ids({2}, "a", transitions) == {3}
