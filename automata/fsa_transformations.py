import logging
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple
from collections import defaultdict, deque

from .exceptions import AutomatonInternalError
from .fsa_properties import is_deterministic, reachable_states

logger = logging.getLogger(__name__)


class AlreadyDeterministic:
    """Result of nfa_to_dfa when the input is already a DFA and nothing was converted."""

    message = "It is already DFA."

    def __repr__(self):
        return 'ALREADY_DFA'


ALREADY_DFA = AlreadyDeterministic()


def epsilon_closure(fsa, states: Iterable[int]) -> FrozenSet[int]:
    """Compute the epsilon closure of a set of state indices, the states themselves included"""
    closure = set(states)
    stack = list(closure)

    while stack:
        state = stack.pop()
        for epsilon_target in fsa.successors(state, fsa.epsilon):
            if epsilon_target not in closure:
                closure.add(epsilon_target)
                stack.append(epsilon_target)

    return frozenset(closure)


def move(fsa, states: Iterable[int], symbol: int) -> FrozenSet[int]:
    """Compute all states reachable from given states on given symbol"""
    result = set()
    for state in states:
        result.update(fsa.successors(state, symbol))
    return frozenset(result)


def subset_construction(fsa):
    """
    Builds a DFA equivalent to the given automaton with the subset construction.

    Each DFA state stands for the epsilon closure of a set of source states.
    DFA states are named Q0, Q1, ... in the order they are discovered, Q0
    being the closure of the starting state. Symbols leading to the empty set
    get no transition at all, so the result may be partial.

    Args:
        fsa: An Automaton, deterministic or not

    Returns:
        A new Automaton of the same class
    """
    # Memorisation cache for epsilon closures
    epsilon_closure_cache: Dict[FrozenSet[int], FrozenSet[int]] = {}

    def closure_of(states: FrozenSet[int]) -> FrozenSet[int]:
        if states not in epsilon_closure_cache:
            epsilon_closure_cache[states] = epsilon_closure(fsa, states)
        return epsilon_closure_cache[states]

    start_closure = closure_of(frozenset({fsa.start_index}))

    # Insertion order of this map is the discovery order
    dfa_state_map: Dict[FrozenSet[int], str] = {start_closure: 'Q0'}
    dfa_transitions: Dict[str, Dict[str, List[str]]] = defaultdict(dict)
    queue = deque([start_closure])

    while queue:
        current_nfa_states = queue.popleft()
        current_dfa_state = dfa_state_map[current_nfa_states]

        for symbol_index, symbol in enumerate(fsa.alphabet):
            new_state_set = closure_of(move(fsa, current_nfa_states, symbol_index))

            if not new_state_set:
                continue

            if new_state_set not in dfa_state_map:
                dfa_state_map[new_state_set] = f"Q{len(dfa_state_map)}"
                queue.append(new_state_set)

            if symbol in dfa_transitions[current_dfa_state]:
                raise AutomatonInternalError(
                    f"Subset {current_dfa_state} was expanded twice on symbol '{symbol}'"
                )
            dfa_transitions[current_dfa_state][symbol] = [dfa_state_map[new_state_set]]

    # A DFA state accepts when it contains an accepting NFA state
    dfa_accepting = [
        state_name for state_set, state_name in dfa_state_map.items()
        if state_set & fsa.accepting_indices
    ]

    return type(fsa)(
        list(dfa_state_map.values()),
        fsa.alphabet,
        'Q0',
        dfa_accepting,
        dict(dfa_transitions)
    )


def nfa_to_dfa(nfa):
    """
    Converts a non-deterministic finite automaton (NFA) to a deterministic finite automaton (DFA)
    using subset construction algorithm.

    Args:
        nfa: An Automaton

    Returns:
        ALREADY_DFA if the automaton is deterministic already, otherwise a new
        Automaton where each state represents a subset of NFA states
    """
    if is_deterministic(nfa):
        return ALREADY_DFA

    dfa = subset_construction(nfa)
    logger.debug("Converted NFA with %d states into DFA with %d states",
                 nfa.state_count, dfa.state_count)
    return dfa


def remove_unreachable_states(fsa):
    """Remove states that are unreachable from the start state."""
    reachable = reachable_states(fsa)
    if len(reachable) == fsa.state_count:
        return fsa

    new_states = [state for index, state in enumerate(fsa.states) if index in reachable]
    kept = set(new_states)
    new_transitions: Dict = defaultdict(dict)

    # Sources are reachable, so every target of a kept state is kept as well
    for source, symbol, targets in fsa.transition_rows():
        if source in kept:
            new_transitions[source][symbol] = targets

    return type(fsa)(
        new_states,
        fsa.alphabet,
        fsa.start_state,
        [state for state in fsa.accepting_states if state in kept],
        dict(new_transitions)
    )


def _pair(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a < b else (b, a)


def minimise_dfa(fsa):
    """
    Minimises a deterministic finite automaton with the table-filling algorithm.

    A non-deterministic input is converted with the subset construction first
    and the converted DFA is minimised. States unreachable from the start are
    dropped before any pair is compared.

    Missing transitions behave like moves into an implicit, non-accepting
    sink. The sink takes part in the table so that a state with a missing
    transition is told apart from one that can still accept, but it never
    appears in the result, and missing transitions stay missing.

    Args:
        fsa: An Automaton

    Returns:
        A new Automaton whose states are named Q0, Q1, ... in the order their
        equivalence classes were created
    """
    dfa = fsa if is_deterministic(fsa) else subset_construction(fsa)
    dfa = remove_unreachable_states(dfa)

    state_count = dfa.state_count
    sink = state_count
    accepting = dfa.accepting_indices

    def successor(state: int, symbol: int) -> int:
        if state == sink:
            return sink
        targets = dfa.successors(state, symbol)
        if len(targets) > 1:
            raise AutomatonInternalError(
                f"State {dfa.states[state]} has {len(targets)} targets on '{dfa.alphabet[symbol]}'"
            )
        return next(iter(targets)) if targets else sink

    pairs = [
        (a, b)
        for a in range(state_count + 1)
        for b in range(a + 1, state_count + 1)
    ]

    # Initially distinguishable: exactly one of the pair is accepting
    distinguishable: Set[Tuple[int, int]] = {
        (a, b) for a, b in pairs if (a in accepting) != (b in accepting)
    }

    changed = True
    while changed:
        changed = False
        for a, b in pairs:
            if (a, b) in distinguishable:
                continue

            for symbol in range(dfa.symbol_count):
                a_target = successor(a, symbol)
                b_target = successor(b, symbol)
                if a_target != b_target and _pair(a_target, b_target) in distinguishable:
                    distinguishable.add((a, b))
                    changed = True
                    break

    # Each state joins the first group whose representative it matches
    groups: List[List[int]] = []
    state_group: Dict[int, int] = {}
    for state in range(state_count):
        for group_number, group in enumerate(groups):
            if _pair(state, group[0]) not in distinguishable:
                group.append(state)
                state_group[state] = group_number
                break
        else:
            state_group[state] = len(groups)
            groups.append([state])

    new_states = [f"Q{number}" for number in range(len(groups))]
    new_accepting = []
    new_transitions: Dict[str, Dict[str, List[str]]] = {}

    for group_number, group in enumerate(groups):
        group_name = new_states[group_number]
        representative = group[0]

        if representative in accepting:
            new_accepting.append(group_name)

        new_transitions[group_name] = {}
        for symbol_index, symbol in enumerate(dfa.alphabet):
            target = successor(representative, symbol_index)
            if target != sink:
                new_transitions[group_name][symbol] = [new_states[state_group[target]]]

    logger.debug("Minimised DFA from %d to %d states", fsa.state_count, len(new_states))

    return type(fsa)(
        new_states,
        dfa.alphabet,
        new_states[state_group[dfa.start_index]],
        new_accepting,
        new_transitions
    )
