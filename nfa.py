import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from config import Config
from errors import MalformedPostfix, PatternTooLong
from regex_parser import (
    CONCAT,
    EPSILON,
    LITERAL,
    OPTIONAL,
    PLUS,
    STAR,
    UNION,
    parse_regex_to_postfix,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class State:
    # identity is the id alone
    id: int
    is_accept: bool = field(default=False, compare=False)

    def __repr__(self):
        return f"q{self.id}{'*' if self.is_accept else ''}"


@dataclass(frozen=True)
class Transition:
    source: int
    target: int
    symbol: Optional[str] = None  # None => epsilon

    @property
    def is_epsilon(self):
        return self.symbol is None

    @property
    def label(self):
        return Config.EPSILON_SYMBOL if self.symbol is None else self.symbol


@dataclass(frozen=True)
class NFA:
    start: State
    end: State
    states: Tuple[State, ...]
    transitions: Tuple[Transition, ...]
    _outgoing: Dict[Tuple[int, Optional[str]], Tuple[Transition, ...]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        outgoing = {}
        for t in self.transitions:
            outgoing.setdefault((t.source, t.symbol), []).append(t)
        object.__setattr__(self, "_outgoing", {k: tuple(v) for k, v in outgoing.items()})

    def state(self, state_id):
        return self.states[state_id]

    def outgoing(self, state_id, symbol=None):
        """Transitions leaving `state_id` labelled `symbol` (None for epsilon)."""
        return self._outgoing.get((state_id, symbol), ())

    @property
    def accept_states(self):
        return tuple(s for s in self.states if s.is_accept)

    @property
    def alphabet(self):
        return sorted({t.symbol for t in self.transitions if t.symbol is not None})

    @property
    def state_count(self):
        return len(self.states)

    @property
    def transition_count(self):
        return len(self.transitions)


class NFABuilder:
    """Thompson construction over a postfix token stream.

    States live in an arena (`self.accept`, indexed by id) while fragments
    are `(start_id, end_id)` pairs on an explicit stack.
    """

    def __init__(self):
        self.accept: List[bool] = []
        self.transitions: List[Transition] = []
        self.stack: List[Tuple[int, int]] = []

    def new_state(self, is_accept=False):
        self.accept.append(is_accept)
        return len(self.accept) - 1

    def add(self, source, target, symbol=None):
        self.transitions.append(Transition(source, target, symbol))

    def pop(self, count, token):
        if len(self.stack) < count:
            raise MalformedPostfix(
                f"Not enough operands for '{token}' ({count} required, {len(self.stack)} available)",
                token.position,
            )
        frags = self.stack[-count:]
        del self.stack[-count:]
        # accept status belongs to the outermost fragment only
        for start, end in frags:
            self.accept[start] = False
            self.accept[end] = False
        return frags

    def literal(self, symbol):
        start = self.new_state()
        end = self.new_state(True)
        self.add(start, end, symbol)
        self.stack.append((start, end))

    def concat(self, token):
        (s1, e1), (s2, e2) = self.pop(2, token)
        self.add(e1, s2)
        self.stack.append((s1, e2))

    def union(self, token):
        (s1, e1), (s2, e2) = self.pop(2, token)
        start = self.new_state()
        end = self.new_state(True)
        self.add(start, s1)
        self.add(start, s2)
        self.add(e1, end)
        self.add(e2, end)
        self.stack.append((start, end))

    def repeat(self, token, loop, bypass):
        ((s, e),) = self.pop(1, token)
        start = self.new_state()
        end = self.new_state(True)
        self.add(start, s)
        self.add(e, end)
        if loop:
            self.add(e, s)
        if bypass:
            self.add(start, end)
        self.stack.append((start, end))

    def feed(self, token):
        if token.kind == LITERAL:
            self.literal(token.value)
        elif token.kind == EPSILON:
            self.literal(None)
        elif token.kind == CONCAT:
            self.concat(token)
        elif token.kind == UNION:
            self.union(token)
        elif token.kind == STAR:
            self.repeat(token, loop=True, bypass=True)
        elif token.kind == PLUS:
            self.repeat(token, loop=True, bypass=False)
        elif token.kind == OPTIONAL:
            self.repeat(token, loop=False, bypass=True)
        else:
            raise MalformedPostfix(f"Unexpected token '{token}' in postfix expression", token.position)

    def build(self, postfix):
        for token in postfix:
            self.feed(token)
        if len(self.stack) != 1:
            raise MalformedPostfix(
                f"Expected exactly one NFA fragment after construction, found {len(self.stack)}"
            )
        start, end = self.stack.pop()
        self.accept[start] = False
        self.accept[end] = True
        return self.freeze(start, end)

    def build_empty(self):
        start = self.new_state(True)
        return self.freeze(start, start)

    def freeze(self, start, end):
        # the start state is always numbered 0
        def renumber(i):
            if i == start:
                return 0
            if i == 0:
                return start
            return i

        accept = list(self.accept)
        accept[0], accept[start] = accept[start], accept[0]
        states = tuple(State(i, flag) for i, flag in enumerate(accept))
        transitions = tuple(Transition(renumber(t.source), renumber(t.target), t.symbol) for t in self.transitions)
        return NFA(states[0], states[renumber(end)], states, transitions)


def build_nfa_from_postfix(postfix) -> NFA:
    return NFABuilder().build(postfix)


def compile(pattern: str, max_length=None) -> NFA:
    """Compile `pattern` into an NFA, all or nothing.

    Raises a `RegexError` subclass describing the first problem found.
    """
    if max_length is None:
        max_length = Config.MAX_PATTERN_LENGTH
    if len(pattern) > max_length:
        raise PatternTooLong(f"Regex is too long ({len(pattern)} chars, max {max_length})")

    if pattern == "":
        nfa = NFABuilder().build_empty()
    else:
        nfa = build_nfa_from_postfix(parse_regex_to_postfix(pattern))
    logger.debug("compiled %r: %d states, %d transitions", pattern, nfa.state_count, nfa.transition_count)
    return nfa
