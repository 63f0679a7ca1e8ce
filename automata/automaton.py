from collections import abc
from typing import Dict, FrozenSet, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import fsa_properties, fsa_simulation, fsa_transformations
from .exceptions import AutomatonValidationError

EPSILON = 'epsilon'

# Labels that mean "no input consumed" when building transitions
EPSILON_LABELS = frozenset({EPSILON, ''})

FSA_KEYS = ['states', 'alphabet', 'transitions', 'startingState', 'acceptingStates']

_NO_TARGETS: FrozenSet[int] = frozenset()


class Automaton:
    """
    A finite automaton, possibly non-deterministic and with epsilon moves.

    States and symbols are interned to integer indices when the automaton is
    built: state ``i`` is ``states[i]``, symbol ``j`` is ``alphabet[j]`` and
    epsilon gets the index right after the last symbol. The transition
    relation maps ``(state index, symbol index)`` pairs to frozensets of
    state indices. An Automaton is never changed after construction; the
    transforming operations return new instances.
    """

    def __init__(self, states: Iterable[Hashable], alphabet: Iterable[Hashable],
                 start_state: Hashable, accepting_states: Iterable[Hashable],
                 transitions: Optional[Mapping] = None):
        states = list(states)
        alphabet = list(alphabet)

        if not states:
            raise AutomatonValidationError("States cannot be empty")
        if not alphabet:
            raise AutomatonValidationError("Alphabet cannot be empty")

        self._states: Tuple = tuple(states)
        self._alphabet: Tuple = tuple(alphabet)
        self._state_index: Dict = _intern(states, 'state')
        self._symbol_index: Dict = _intern(alphabet, 'symbol')

        for symbol in alphabet:
            if symbol in EPSILON_LABELS:
                raise AutomatonValidationError(
                    f"'{EPSILON}' is reserved and cannot be part of the alphabet"
                )

        self._start = self._position(start_state, "Starting state")

        accepting = set()
        for state in accepting_states:
            accepting.add(self._position(state, "Accepting state"))
        self._accepting: FrozenSet[int] = frozenset(accepting)

        transitions = {} if transitions is None else transitions
        self._transitions: Dict[Tuple[int, int], FrozenSet[int]] = self._build_transitions(transitions)

    def _build_transitions(self, transitions: Mapping) -> Dict[Tuple[int, int], FrozenSet[int]]:
        if not isinstance(transitions, abc.Mapping):
            raise AutomatonValidationError("transitions must be a dictionary")

        table: Dict[Tuple[int, int], set] = {}
        for source, by_symbol in transitions.items():
            source_index = self._position(source, "Transition source")
            if not isinstance(by_symbol, abc.Mapping):
                raise AutomatonValidationError(f"Transitions of state {source!r} must be a dictionary")

            for symbol, targets in by_symbol.items():
                symbol_index = self._label_index(symbol)
                if symbol_index is None:
                    raise AutomatonValidationError(
                        f"Transition symbol {symbol!r} of state {source!r} not in alphabet"
                    )
                if isinstance(targets, str) or not isinstance(targets, abc.Iterable):
                    raise AutomatonValidationError(
                        f"Targets of state {source!r} on {symbol!r} must be a list of states"
                    )

                targets_of = table.setdefault((source_index, symbol_index), set())
                for target in targets:
                    targets_of.add(self._position(target, "Transition target"))

        return {key: frozenset(targets) for key, targets in table.items() if targets}

    def _label_index(self, symbol) -> Optional[int]:
        if isinstance(symbol, str) and symbol in EPSILON_LABELS:
            return self.epsilon
        return self._symbol_index.get(symbol)

    def _position(self, state, description: str = "State") -> int:
        try:
            return self._state_index[state]
        except (KeyError, TypeError):
            raise AutomatonValidationError(f"{description} {state!r} not in states list") from None

    @classmethod
    def from_dict(cls, fsa: Mapping) -> 'Automaton':
        """
        Builds an automaton from the FSA dictionary format used by the JSON API:
        ``states``, ``alphabet``, ``transitions``, ``startingState`` and
        ``acceptingStates``.
        """
        if not isinstance(fsa, abc.Mapping):
            raise AutomatonValidationError("FSA must be a dictionary")

        for key in FSA_KEYS:
            if key not in fsa:
                raise AutomatonValidationError(f"Missing required key: {key}")

        for key in ('states', 'alphabet', 'acceptingStates'):
            if not isinstance(fsa[key], list):
                raise AutomatonValidationError(f"{key} must be a list")

        return cls(
            fsa['states'],
            fsa['alphabet'],
            fsa['startingState'],
            fsa['acceptingStates'],
            fsa['transitions']
        )

    # Name-level accessors

    @property
    def states(self) -> Tuple:
        return self._states

    @property
    def alphabet(self) -> Tuple:
        return self._alphabet

    @property
    def start_state(self):
        return self._states[self._start]

    @property
    def accepting_states(self) -> FrozenSet:
        return frozenset(self._states[index] for index in self._accepting)

    @property
    def transitions(self) -> Dict:
        """The transition relation as ``{source: {symbol: [targets]}}``, a fresh copy each time."""
        result: Dict = {}
        for source, symbol, targets in self.transition_rows():
            result.setdefault(source, {})[symbol] = targets
        return result

    def transition_rows(self) -> List[Tuple]:
        """
        Every transition as a ``(from_state, symbol, [to_states])`` row, in
        state order, then alphabet order, epsilon last. Targets are listed in
        state order.
        """
        labels = list(self._alphabet) + [EPSILON]
        rows = []
        for source in range(self.state_count):
            for symbol in range(self.symbol_count + 1):
                targets = self.successors(source, symbol)
                if targets:
                    rows.append((
                        self._states[source],
                        labels[symbol],
                        [self._states[target] for target in sorted(targets)]
                    ))
        return rows

    def to_dict(self) -> Dict:
        return {
            'states': list(self._states),
            'alphabet': list(self._alphabet),
            'transitions': self.transitions,
            'startingState': self.start_state,
            'acceptingStates': [state for index, state in enumerate(self._states) if index in self._accepting]
        }

    # Index-level accessors used by the algorithms

    @property
    def state_count(self) -> int:
        return len(self._states)

    @property
    def symbol_count(self) -> int:
        return len(self._alphabet)

    @property
    def epsilon(self) -> int:
        """Index of the epsilon label."""
        return len(self._alphabet)

    @property
    def start_index(self) -> int:
        return self._start

    @property
    def accepting_indices(self) -> FrozenSet[int]:
        return self._accepting

    def successors(self, state: int, symbol: int) -> FrozenSet[int]:
        return self._transitions.get((state, symbol), _NO_TARGETS)

    def index_of_symbol(self, symbol) -> Optional[int]:
        """Index of an alphabet symbol, or None when the symbol is not in the alphabet."""
        try:
            return self._symbol_index.get(symbol)
        except TypeError:
            return None

    # Operations

    def is_deterministic(self) -> bool:
        return fsa_properties.is_deterministic(self)

    def is_complete(self) -> bool:
        return fsa_properties.is_complete(self)

    def reachable_states(self) -> FrozenSet:
        return frozenset(self._states[index] for index in fsa_properties.reachable_states(self))

    def accepts(self, word: Iterable) -> bool:
        return fsa_simulation.accepts(self, word)

    def epsilon_closure(self, states: Iterable) -> FrozenSet:
        indices = [self._position(state) for state in states]
        closure = fsa_transformations.epsilon_closure(self, indices)
        return frozenset(self._states[index] for index in closure)

    def move(self, states: Iterable, symbol) -> FrozenSet:
        """Direct targets of ``states`` on ``symbol``; an unknown symbol has no targets."""
        indices = [self._position(state) for state in states]
        try:
            symbol_index = self._label_index(symbol)
        except TypeError:
            symbol_index = None
        if symbol_index is None:
            return frozenset()
        targets = fsa_transformations.move(self, indices, symbol_index)
        return frozenset(self._states[index] for index in targets)

    def to_dfa(self):
        """Subset construction; returns ALREADY_DFA when there is nothing to convert."""
        return fsa_transformations.nfa_to_dfa(self)

    def minimize(self) -> 'Automaton':
        return fsa_transformations.minimise_dfa(self)

    def remove_unreachable_states(self) -> 'Automaton':
        return fsa_transformations.remove_unreachable_states(self)

    def __eq__(self, other):
        if not isinstance(other, Automaton):
            return NotImplemented
        return (self._states == other._states
                and self._alphabet == other._alphabet
                and self._start == other._start
                and self._accepting == other._accepting
                and self._transitions == other._transitions)

    def __hash__(self):
        return hash((self._states, self._alphabet, self._start, self._accepting))

    def __repr__(self):
        return (f"Automaton(states={list(self._states)!r}, alphabet={list(self._alphabet)!r}, "
                f"start_state={self.start_state!r}, accepting_states={sorted(map(str, self.accepting_states))!r})")


def _intern(items: Sequence, kind: str) -> Dict:
    index = {}
    for position, item in enumerate(items):
        try:
            if item in index:
                raise AutomatonValidationError(f"Duplicate {kind} {item!r}")
        except TypeError:
            raise AutomatonValidationError(f"{kind.capitalize()} {item!r} is not hashable") from None
        index[item] = position
    return index
