from typing import Dict, Iterable, List, Mapping, Union

from .automaton import Automaton
from .exceptions import AutomatonValidationError


def parse_list(text: str) -> List[str]:
    """
    Splits comma-separated user input into a list of items.

    Whitespace around items is stripped, empty items are dropped and a
    repeated item keeps only its first occurrence.
    """
    if not isinstance(text, str):
        raise AutomatonValidationError("Expected a comma-separated string")

    items = []
    for item in text.split(','):
        item = item.strip()
        if item and item not in items:
            items.append(item)
    return items


def build_transitions(rows: Iterable[Mapping]) -> Dict[str, Dict[str, List[str]]]:
    """
    Turns transition table rows into the ``{source: {symbol: [targets]}}`` mapping.

    Each row carries ``fromState``, ``symbol`` and ``toStates``. Unfinished rows
    (any of the three left empty) are skipped; rows sharing a source and
    symbol have their targets merged. The create form used to keep only the
    last such row; merging keeps every target the user ticked.
    """
    transitions: Dict[str, Dict[str, List[str]]] = {}

    for row in rows or ():
        if not isinstance(row, Mapping):
            raise AutomatonValidationError("Each transition row must be an object")

        from_state = row.get('fromState')
        symbol = row.get('symbol')
        to_states = row.get('toStates') or []
        if isinstance(to_states, str):
            to_states = parse_list(to_states)

        if not from_state or not symbol or not to_states:
            continue

        if not isinstance(from_state, str) or not isinstance(symbol, str):
            raise AutomatonValidationError("Transition row fields must be strings")

        targets = transitions.setdefault(from_state, {}).setdefault(symbol, [])
        for state in to_states:
            if state not in targets:
                targets.append(state)

    return transitions


def automaton_from_form(states_text: str, alphabet_text: str, start_state: str,
                        accepting_states: Union[str, Iterable[str]],
                        rows: Iterable[Mapping] = ()) -> Automaton:
    """
    Builds an automaton the way the create form describes one.

    Args:
        states_text: Comma-separated states, e.g. ``"q0, q1, q2"``
        alphabet_text: Comma-separated symbols, epsilon excluded
        start_state: The selected starting state
        accepting_states: The ticked final states, as a list or comma-separated text
        rows: Transition table rows, see build_transitions

    Raises:
        AutomatonValidationError: If states or alphabet are empty or the rows
            reference anything undeclared
    """
    states = parse_list(states_text)
    symbols = parse_list(alphabet_text)

    if not states or not symbols:
        raise AutomatonValidationError("States and alphabet cannot be empty")

    if isinstance(accepting_states, str):
        accepting_states = parse_list(accepting_states)

    return Automaton(states, symbols, start_state, accepting_states, build_transitions(rows))


def automaton_from_payload(data: Mapping) -> Automaton:
    """
    Builds an automaton from a JSON request body holding either ``fsa`` (the
    FSA dictionary format) or ``form`` (the raw create form inputs).
    """
    if not isinstance(data, Mapping):
        raise AutomatonValidationError("Request body must be a JSON object")

    fsa = data.get('fsa')
    if fsa:
        return Automaton.from_dict(fsa)

    form = data.get('form')
    if form:
        if not isinstance(form, Mapping):
            raise AutomatonValidationError("form must be an object")
        return automaton_from_form(
            form.get('states', ''),
            form.get('alphabet', ''),
            form.get('startState', ''),
            form.get('finalStates', []),
            form.get('transitionRows', [])
        )

    raise AutomatonValidationError("Missing FSA definition")
