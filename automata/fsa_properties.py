from typing import Set
from collections import deque


def is_deterministic(fsa) -> bool:
    """
    Checks if the FSA is deterministic.

    An FSA is deterministic if:
    1. It has no epsilon transitions
    2. For each state and each symbol, there is exactly one transition

    A missing transition disqualifies the FSA as well, so a DFA here is
    always complete over its alphabet.

    Args:
        fsa: An Automaton

    Returns:
        bool: True if the FSA is deterministic, False otherwise
    """
    # Any epsilon move anywhere makes the automaton non-deterministic
    for state in range(fsa.state_count):
        if fsa.successors(state, fsa.epsilon):
            return False

    for state in range(fsa.state_count):
        for symbol in range(fsa.symbol_count):
            if len(fsa.successors(state, symbol)) != 1:
                return False

    return True


def is_complete(fsa) -> bool:
    """
    Checks if the FSA is complete.

    An FSA is complete if for each state and each symbol, there is at least one transition.
    Epsilon transitions are ignored for completeness check.

    Args:
        fsa: An Automaton

    Returns:
        bool: True if the FSA is complete, False otherwise
    """
    for state in range(fsa.state_count):
        for symbol in range(fsa.symbol_count):
            if not fsa.successors(state, symbol):
                return False

    return True


def reachable_states(fsa) -> Set[int]:
    """
    Collects the indices of every state reachable from the starting state,
    following alphabet and epsilon transitions alike.

    Args:
        fsa: An Automaton

    Returns:
        Set of reachable state indices, the starting state included
    """
    reachable = {fsa.start_index}
    queue = deque([fsa.start_index])

    while queue:
        current_state = queue.popleft()

        # Epsilon is interned right after the last alphabet symbol
        for symbol in range(fsa.symbol_count + 1):
            for next_state in fsa.successors(current_state, symbol):
                if next_state not in reachable:
                    reachable.add(next_state)
                    queue.append(next_state)

    return reachable


def is_connected(fsa) -> bool:
    """An FSA is connected if all states are reachable from the starting state."""
    return len(reachable_states(fsa)) == fsa.state_count
