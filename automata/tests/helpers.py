from itertools import product

from automata.automaton import Automaton


def all_strings(alphabet, max_length):
    """Every string over the alphabet up to max_length symbols, the empty string included."""
    for length in range(max_length + 1):
        for symbols in product(alphabet, repeat=length):
            yield ''.join(symbols)


def scenario_a():
    """NFA over {a, b} accepting strings that contain 'abb'."""
    return Automaton(
        ['q0', 'q1', 'q2', 'q3'],
        ['a', 'b'],
        'q0',
        ['q3'],
        {
            'q0': {'a': ['q0', 'q1'], 'b': ['q0']},
            'q1': {'b': ['q2']},
            'q2': {'b': ['q3']},
            'q3': {'a': ['q3'], 'b': ['q3']}
        }
    )


def even_as_dfa():
    """Complete DFA accepting strings with an even number of 'a's."""
    return Automaton(
        ['S0', 'S1'],
        ['a', 'b'],
        'S0',
        ['S0'],
        {
            'S0': {'a': ['S1'], 'b': ['S0']},
            'S1': {'a': ['S0'], 'b': ['S1']}
        }
    )
