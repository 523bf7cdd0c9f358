"""Security: role-permission table, evaluator, route/action guards. No FastAPI."""

from elgar.security.evaluator import PermissionEvaluator
from elgar.security.guard import ActionGuard, GuardDecision, GuardState, RouteGuard
from elgar.security.permissions import SUPER_ROLES, WILDCARD, permissions_for

__all__ = [
    "ActionGuard",
    "GuardDecision",
    "GuardState",
    "PermissionEvaluator",
    "RouteGuard",
    "SUPER_ROLES",
    "WILDCARD",
    "permissions_for",
]
