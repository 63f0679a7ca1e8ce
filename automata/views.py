import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .automaton import Automaton
from .builders import automaton_from_payload
from .fsa_transformations import ALREADY_DFA

logger = logging.getLogger(__name__)


def _automaton_stats(automaton: Automaton) -> dict:
    return {
        'states_count': automaton.state_count,
        'alphabet_size': automaton.symbol_count,
        'transitions_count': sum(len(targets) for _, _, targets in automaton.transition_rows()),
        'accepting_states_count': len(automaton.accepting_states)
    }


def _render(automaton: Automaton) -> dict:
    """The FSA dictionary plus the table rows the renderer displays."""
    rendered = automaton.to_dict()
    rendered['rows'] = [
        {'fromState': source, 'symbol': symbol, 'toStates': targets}
        for source, symbol, targets in automaton.transition_rows()
    ]
    return rendered


def _server_error(request, error: Exception) -> JsonResponse:
    logger.exception("Unexpected failure in %s", request.path)
    return JsonResponse({'error': f'Server error: {str(error)}'}, status=500)


@csrf_exempt
@require_POST
def create_automaton(request):
    """
    Django view that builds an automaton and renders it back.

    Expects a POST request with a JSON body containing either:
    - fsa: The FSA definition in the dictionary format
    - form: The create form inputs (states, alphabet, startState, finalStates, transitionRows)

    Returns a JSON response with the rendered automaton.
    """
    try:
        data = json.loads(request.body)
        automaton = automaton_from_payload(data)

        return JsonResponse({
            'success': True,
            'automaton': _render(automaton)
        })

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        return _server_error(request, e)


@csrf_exempt
@require_POST
def check_deterministic(request):
    """
    Django view to check whether an automaton is a DFA.
    """
    try:
        data = json.loads(request.body)
        automaton = automaton_from_payload(data)

        return JsonResponse({
            'deterministic': automaton.is_deterministic(),
            'complete': automaton.is_complete()
        })

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        return _server_error(request, e)


@csrf_exempt
@require_POST
def check_acceptance(request):
    """
    Django view to test a string against an automaton.

    Expects a POST request with a JSON body containing:
    - fsa or form: The automaton
    - input: The string to test, one character per symbol, or a list of symbols

    Returns a JSON response with the acceptance result.
    """
    try:
        data = json.loads(request.body)
        automaton = automaton_from_payload(data)
        input_string = data.get('input', '')

        if not isinstance(input_string, (str, list)):
            return JsonResponse({'error': 'input must be a string or a list of symbols'}, status=400)

        return JsonResponse({
            'accepted': automaton.accepts(input_string),
            'deterministic': automaton.is_deterministic(),
            'input': input_string
        })

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        return _server_error(request, e)


@csrf_exempt
@require_POST
def convert_nfa_to_dfa(request):
    """
    Django view to handle NFA to DFA conversion requests.

    Expects a POST request with a JSON body containing the automaton as fsa or form.

    Returns a JSON response with the converted DFA, or with already_dfa set
    when the automaton needed no conversion.
    """
    try:
        data = json.loads(request.body)
        automaton = automaton_from_payload(data)

        converted_dfa = automaton.to_dfa()

        if converted_dfa is ALREADY_DFA:
            return JsonResponse({
                'success': True,
                'already_dfa': True,
                'message': ALREADY_DFA.message
            })

        original_stats = _automaton_stats(automaton)
        converted_stats = _automaton_stats(converted_dfa)

        return JsonResponse({
            'success': True,
            'already_dfa': False,
            'converted_dfa': _render(converted_dfa),
            'statistics': {
                'original': original_stats,
                'converted': converted_stats,
                'states_added': converted_stats['states_count'] - original_stats['states_count']
            },
            'message': 'NFA successfully converted to DFA'
        })

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        return _server_error(request, e)


@csrf_exempt
@require_POST
def min_dfa(request):
    """
    Django view to handle DFA minimisation requests.

    Expects a POST request with a JSON body containing the automaton as fsa or
    form. Non-deterministic automata are converted before they are minimised.

    Returns a JSON response with the minimised DFA.
    """
    try:
        data = json.loads(request.body)
        automaton = automaton_from_payload(data)

        was_deterministic = automaton.is_deterministic()
        minimised_fsa = automaton.minimize()

        original_stats = _automaton_stats(automaton)
        minimised_stats = _automaton_stats(minimised_fsa)
        is_already_minimal = was_deterministic and original_stats['states_count'] == minimised_stats['states_count']

        if not was_deterministic:
            message = 'NFA converted and minimised'
        elif is_already_minimal:
            message = 'DFA was already minimal'
        else:
            message = 'DFA minimised successfully'

        return JsonResponse({
            'success': True,
            'minimised_fsa': _render(minimised_fsa),
            'statistics': {
                'original': original_stats,
                'minimised': minimised_stats,
                'states_reduced': original_stats['states_count'] - minimised_stats['states_count'],
                'is_already_minimal': is_already_minimal
            },
            'message': message
        })

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        return _server_error(request, e)
