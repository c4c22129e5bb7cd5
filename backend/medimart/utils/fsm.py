"""Simple finite state machine utility for enforcing allowed status transitions.

Designed for lightweight lifecycle models (account approval status today).
Usage:
    from medimart.utils.fsm import TransitionValidator
    ACCOUNT_FSM = TransitionValidator({
        'PENDING': {'APPROVED', 'REJECTED', 'SUSPENDED'},
        'APPROVED': {'REJECTED', 'SUSPENDED'},
        'REJECTED': {'APPROVED'},
        'SUSPENDED': {'APPROVED'},
    })
    ACCOUNT_FSM.assert_can_transition(current_status, target_status)

Raises 400 abort if invalid.
"""
from __future__ import annotations
from typing import Iterable, List, Mapping
from flask import abort

class TransitionValidator:
    def __init__(self, graph: Mapping[str, Iterable[str]], field_name: str = 'status'):
        self.graph = {k: frozenset(v) for k, v in graph.items()}
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, frozenset())

    def allowed_targets(self, current: str) -> List[str]:
        return sorted(self.graph.get(current, frozenset()))

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            abort(400, description=f"Invalid {self.field_name} transition {current} -> {target}")
        return True

__all__ = ['TransitionValidator']
