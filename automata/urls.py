from django.urls import path
from . import views

urlpatterns = [
    # Build an automaton and render it back
    path('api/create-automaton/', views.create_automaton, name='create_automaton'),

    # Property checking endpoints
    path('api/check-deterministic/', views.check_deterministic, name='check_deterministic'),

    # String acceptance
    path('api/accepts/', views.check_acceptance, name='accepts'),

    # FSA Transformation endpoints
    path('api/nfa-to-dfa/', views.convert_nfa_to_dfa, name='nfa_to_dfa'),
    path('api/minimise-dfa/', views.min_dfa, name='minimise_dfa'),
]
