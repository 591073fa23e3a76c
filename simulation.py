import logging
from typing import FrozenSet, Iterable, List, Optional, Tuple

from nfa import NFA, State, Transition

logger = logging.getLogger(__name__)

ActiveStateSet = FrozenSet[State]


def epsilon_closure(states: Iterable[State], nfa: NFA) -> ActiveStateSet:
    """All states reachable from `states` using epsilon transitions only.

    Worklist based, so deep automata never grow the call stack.
    """
    closure = {s.id for s in states}
    stack = list(closure)
    while stack:
        current = stack.pop()
        for t in nfa.outgoing(current, None):
            if t.target not in closure:
                closure.add(t.target)
                stack.append(t.target)
    return frozenset(nfa.state(i) for i in closure)


def step(active: Iterable[State], char: str, nfa: NFA) -> ActiveStateSet:
    """Consume `char` from every state in `active`, then close over epsilon.

    An empty result means the input was rejected early; it stays empty.
    """
    direct = {t.target for s in active for t in nfa.outgoing(s.id, char)}
    return epsilon_closure([nfa.state(i) for i in direct], nfa)


def closure_ids(state_ids: Iterable[int], transitions: Iterable[Transition]) -> FrozenSet[int]:
    """Id-level epsilon closure over a plain transition list."""
    epsilon = {}
    for t in transitions:
        if t.symbol is None:
            epsilon.setdefault(t.source, []).append(t.target)
    closure = set(state_ids)
    stack = list(closure)
    while stack:
        for target in epsilon.get(stack.pop(), ()):
            if target not in closure:
                closure.add(target)
                stack.append(target)
    return frozenset(closure)


def step_ids(active_ids: Iterable[int], char: str, transitions: Iterable[Transition]) -> FrozenSet[int]:
    """Same as `step`, but over state ids and a plain transition list."""
    transitions = list(transitions)
    active_ids = set(active_ids)
    direct = {t.target for t in transitions if t.symbol == char and t.source in active_ids}
    return closure_ids(direct, transitions)


def initial_history(nfa: NFA) -> ActiveStateSet:
    return epsilon_closure([nfa.start], nfa)


def has_accept(active: Iterable[State]) -> bool:
    return any(s.is_accept for s in active)


class Simulation:
    """Replayable run of `nfa` over `text`.

    `history[i]` is the active set after consuming `text[:i]`. Entries are
    computed once and cached, so stepping backward never recomputes and
    stepping forward again replays the same sets.
    """

    def __init__(self, nfa: NFA, text: str = ""):
        self.nfa = nfa
        self.text = text
        self._history: List[ActiveStateSet] = [initial_history(nfa)]
        self.index = 0

    @property
    def history(self) -> Tuple[ActiveStateSet, ...]:
        return tuple(self._history)

    @property
    def current(self) -> ActiveStateSet:
        return self._history[self.index]

    @property
    def is_at_end(self):
        return self.index == len(self.text)

    @property
    def is_stuck(self):
        return not self.current

    def step_forward(self):
        if self.index >= len(self.text):
            return False
        if self.index + 1 >= len(self._history):
            char = self.text[self.index]
            self._history.append(step(self._history[self.index], char, self.nfa))
            logger.debug("step %d on %r -> %s", self.index + 1, char, sorted(s.id for s in self._history[-1]))
        self.index += 1
        return True

    def step_backward(self):
        if self.index == 0:
            return False
        self.index -= 1
        return True

    def reset(self):
        del self._history[1:]
        self.index = 0

    def set_text(self, text):
        self.text = text
        self.reset()

    def run_to_end(self):
        while self.step_forward():
            pass
        return self.is_accepted()

    def is_accepted(self):
        return self.is_at_end and has_accept(self.current)

    def active_state_ids(self, index: Optional[int] = None):
        if index is None:
            index = self.index
        return frozenset(s.id for s in self._history[index])

    def fired_transitions(self, index: Optional[int] = None) -> Tuple[Transition, ...]:
        """Transitions that carried history entry `index - 1` into entry `index`."""
        if index is None:
            index = self.index
        if index <= 0 or index >= len(self._history):
            return ()
        before = self.active_state_ids(index - 1)
        after = self.active_state_ids(index)
        char = self.text[index - 1]
        fired = []
        for t in self.nfa.transitions:
            if t.target not in after:
                continue
            if t.symbol == char and t.source in before:
                fired.append(t)
            elif t.symbol is None and t.source in after:
                fired.append(t)
        return tuple(fired)


def matches(nfa: NFA, text: str) -> bool:
    return Simulation(nfa, text).run_to_end()
