from typing import Iterable, List, Optional, Set, Tuple

from .fsa_properties import is_deterministic


def accepts(fsa, word: Iterable) -> bool:
    """
    Decides whether the FSA accepts the given input.

    Deterministic automata are walked one transition per symbol, anything
    else is explored run by run with an explicit stack.

    Args:
        fsa: An Automaton
        word: The input, either a string (one character per symbol) or any
            iterable of alphabet symbols

    Returns:
        True if some run ends in an accepting state after consuming the
        whole input, False otherwise. Symbols outside the alphabet reject.
    """
    symbols = [fsa.index_of_symbol(symbol) for symbol in word]

    if is_deterministic(fsa):
        return _accepts_deterministic(fsa, symbols)
    return _accepts_nondeterministic(fsa, symbols)


def _accepts_deterministic(fsa, symbols: List[Optional[int]]) -> bool:
    current_state = fsa.start_index

    for symbol in symbols:
        if symbol is None:
            return False
        # Deterministic: exactly one target
        (current_state,) = fsa.successors(current_state, symbol)

    return current_state in fsa.accepting_indices


def _accepts_nondeterministic(fsa, symbols: List[Optional[int]]) -> bool:
    """
    Depth-first search over (state, cursor) pairs.

    Epsilon moves keep the cursor where it is, so a pair is only ever pushed
    once; that keeps epsilon cycles from looping forever.
    """
    # No run can consume a symbol the automaton does not know
    if None in symbols:
        return False

    length = len(symbols)
    start = (fsa.start_index, 0)
    stack: List[Tuple[int, int]] = [start]
    visited: Set[Tuple[int, int]] = {start}

    while stack:
        state, cursor = stack.pop()

        pending = [(next_state, cursor) for next_state in fsa.successors(state, fsa.epsilon)]

        if cursor == length:
            if state in fsa.accepting_indices:
                return True
        else:
            pending.extend(
                (next_state, cursor + 1)
                for next_state in fsa.successors(state, symbols[cursor])
            )

        for entry in pending:
            if entry not in visited:
                visited.add(entry)
                stack.append(entry)

    return False
