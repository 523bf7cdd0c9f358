"""Current-user router: resolved permissions, navigation, page guard decisions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from elgar.api.dependencies import get_current_user, get_evaluator, get_route_guard
from elgar.domain.models.user import User
from elgar.domain.schemas.permissions import GuardDecisionResponse, MyPermissionsResponse
from elgar.security.evaluator import PermissionEvaluator
from elgar.security.guard import RouteGuard
from elgar.security.permissions import PAGE_PERMISSIONS

router = APIRouter()


@router.get("/permissions", response_model=MyPermissionsResponse)
async def my_permissions(
    user: Annotated[User, Depends(get_current_user)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_evaluator)],
):
    return MyPermissionsResponse(
        user_id=user.id,
        role=user.role,
        level=evaluator.permission_level(user),
        is_super_role=evaluator.is_super_role(user),
        permissions=sorted(evaluator.resolved_permissions(user)),
        navigation=evaluator.navigation_for(user),
    )


@router.get("/pages/{page}", response_model=GuardDecisionResponse)
async def page_access(
    page: str,
    user: Annotated[User, Depends(get_current_user)],
    route_guard: Annotated[RouteGuard, Depends(get_route_guard)],
    redirect_to: Annotated[str | None, Query()] = None,
):
    """Route-guard decision for a client page. Unknown pages require nothing beyond login."""
    decision = route_guard.decide(user, PAGE_PERMISSIONS.get(page), redirect_to=redirect_to)
    return GuardDecisionResponse(page=page, state=decision.state.value, redirect_to=decision.redirect_to)
