from django.test import TestCase

from automata.builders import automaton_from_form, automaton_from_payload, build_transitions, parse_list
from automata.exceptions import AutomatonValidationError


class TestParseList(TestCase):
    """Test cases for comma-separated input parsing"""

    def test_strips_and_drops_empty_items(self):
        self.assertEqual(parse_list(' q0, q1 ,,q2, '), ['q0', 'q1', 'q2'])

    def test_drops_repeats(self):
        self.assertEqual(parse_list('a, b, a'), ['a', 'b'])

    def test_empty(self):
        self.assertEqual(parse_list(''), [])
        self.assertEqual(parse_list(' , ,'), [])


class TestAutomatonFromForm(TestCase):
    """Test cases for building automata from the create form"""

    def setUp(self):
        self.rows = [
            {'id': '1', 'fromState': 'q0', 'symbol': 'a', 'toStates': ['q0', 'q1']},
            {'id': '2', 'fromState': 'q0', 'symbol': 'b', 'toStates': ['q0']},
            {'id': '3', 'fromState': 'q1', 'symbol': 'b', 'toStates': ['q2']},
            {'id': '4', 'fromState': 'q2', 'symbol': 'b', 'toStates': ['q3']},
            {'id': '5', 'fromState': 'q3', 'symbol': 'a', 'toStates': ['q3']},
            {'id': '6', 'fromState': 'q3', 'symbol': 'b', 'toStates': ['q3']},
        ]

    def test_builds_automaton(self):
        fsa = automaton_from_form('q0, q1, q2, q3', 'a, b', 'q0', ['q3'], self.rows)

        self.assertEqual(fsa.states, ('q0', 'q1', 'q2', 'q3'))
        self.assertEqual(fsa.alphabet, ('a', 'b'))
        self.assertTrue(fsa.accepts('abb'))
        self.assertFalse(fsa.accepts('bb'))

    def test_unfinished_rows_skipped(self):
        rows = self.rows + [
            {'id': '7', 'fromState': '', 'symbol': 'a', 'toStates': ['q0']},
            {'id': '8', 'fromState': 'q1', 'symbol': '', 'toStates': ['q0']},
            {'id': '9', 'fromState': 'q1', 'symbol': 'a', 'toStates': []},
        ]

        fsa = automaton_from_form('q0, q1, q2, q3', 'a, b', 'q0', ['q3'], rows)

        self.assertNotIn('a', fsa.transitions['q1'])

    def test_rows_for_same_pair_merge(self):
        transitions = build_transitions([
            {'fromState': 'q0', 'symbol': 'a', 'toStates': ['q1']},
            {'fromState': 'q0', 'symbol': 'a', 'toStates': ['q2', 'q1']},
        ])

        self.assertEqual(transitions, {'q0': {'a': ['q1', 'q2']}})

    def test_non_string_row_fields(self):
        with self.assertRaisesRegex(AutomatonValidationError, "Transition row fields must be strings"):
            build_transitions([{'fromState': ['q0'], 'symbol': 'a', 'toStates': ['q1']}])

        with self.assertRaisesRegex(AutomatonValidationError, "Transition row fields must be strings"):
            build_transitions([{'fromState': 'q0', 'symbol': {'a': 1}, 'toStates': ['q1']}])

    def test_epsilon_rows(self):
        fsa = automaton_from_form('q0, q1', 'a', 'q0', 'q1', [
            {'fromState': 'q0', 'symbol': 'epsilon', 'toStates': ['q1']},
        ])

        self.assertTrue(fsa.accepts(''))
        self.assertFalse(fsa.is_deterministic())

    def test_empty_states_or_alphabet(self):
        with self.assertRaisesRegex(AutomatonValidationError, "States and alphabet cannot be empty"):
            automaton_from_form('', 'a', 'q0', [], [])

        with self.assertRaisesRegex(AutomatonValidationError, "States and alphabet cannot be empty"):
            automaton_from_form('q0', ' , ', 'q0', [], [])

    def test_missing_start_state(self):
        with self.assertRaises(AutomatonValidationError):
            automaton_from_form('q0, q1', 'a', '', [], [])


class TestAutomatonFromPayload(TestCase):
    """Test cases for request body decoding"""

    def test_fsa_payload(self):
        fsa = automaton_from_payload({'fsa': {
            'states': ['S0'],
            'alphabet': ['a'],
            'transitions': {'S0': {'a': ['S0']}},
            'startingState': 'S0',
            'acceptingStates': ['S0']
        }})

        self.assertTrue(fsa.is_deterministic())

    def test_form_payload(self):
        fsa = automaton_from_payload({'form': {
            'states': 'S0, S1',
            'alphabet': 'a',
            'startState': 'S0',
            'finalStates': ['S1'],
            'transitionRows': [{'fromState': 'S0', 'symbol': 'a', 'toStates': ['S1']}]
        }})

        self.assertTrue(fsa.accepts('a'))

    def test_missing_definition(self):
        with self.assertRaisesRegex(AutomatonValidationError, "Missing FSA definition"):
            automaton_from_payload({'input': 'a'})
