"""Permissions API router: grants, role changes, activation. Privilege managers only, except own grants."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from elgar.api.dependencies import (
    get_current_user,
    get_evaluator,
    get_privilege_service,
    require_permissions,
)
from elgar.application.privilege_service import PrivilegeService
from elgar.domain.models.user import User
from elgar.domain.schemas.permissions import (
    ActiveChangeRequest,
    AvailablePermission,
    GrantRequest,
    ManageableRolesResponse,
    PermissionGrantResponse,
    PermissionsReplaceRequest,
    RoleChangeRequest,
)
from elgar.security.evaluator import PermissionEvaluator
from elgar.security.permissions import AVAILABLE_PERMISSIONS, CAN_MODIFY_PRIVILEGES

router = APIRouter()

PrivilegeManager = Annotated[User, Depends(require_permissions(CAN_MODIFY_PRIVILEGES))]
Privileges = Annotated[PrivilegeService, Depends(get_privilege_service)]


@router.get("/manageable-roles", response_model=ManageableRolesResponse)
async def manageable_roles(
    user: Annotated[User, Depends(get_current_user)],
    privileges: Privileges,
    evaluator: Annotated[PermissionEvaluator, Depends(get_evaluator)],
):
    return ManageableRolesResponse(
        current_role=user.role,
        manageable_roles=list(privileges.manageable_roles(user)),
        can_modify_privileges=evaluator.has_permission(user, CAN_MODIFY_PRIVILEGES),
    )


@router.get("/available", response_model=List[AvailablePermission])
async def available_permissions(user: PrivilegeManager):
    return [
        AvailablePermission(key=key, label=label, description=description)
        for key, (label, description) in AVAILABLE_PERMISSIONS.items()
    ]


@router.get("/users/{user_id}", response_model=List[PermissionGrantResponse])
async def user_permissions(
    user_id: str,
    user: Annotated[User, Depends(get_current_user)],
    privileges: Privileges,
):
    grants = await privileges.active_permissions(actor=user, user_id=user_id)
    return [PermissionGrantResponse.model_validate(g) for g in grants]


@router.put("/users/{user_id}", response_model=List[PermissionGrantResponse])
async def replace_user_permissions(
    user_id: str,
    body: PermissionsReplaceRequest,
    user: PrivilegeManager,
    privileges: Privileges,
):
    grants = await privileges.replace_permissions(
        actor=user, user_id=user_id, permissions=body.permissions
    )
    return [PermissionGrantResponse.model_validate(g) for g in grants]


@router.post(
    "/users/{user_id}/grants",
    response_model=PermissionGrantResponse,
    status_code=status.HTTP_201_CREATED,
)
async def grant_permission(
    user_id: str,
    body: GrantRequest,
    user: PrivilegeManager,
    privileges: Privileges,
):
    grant = await privileges.grant(actor=user, user_id=user_id, permission=body.permission)
    return PermissionGrantResponse.model_validate(grant)


@router.delete("/users/{user_id}/grants/{permission}")
async def revoke_permission(
    user_id: str,
    permission: str,
    user: PrivilegeManager,
    privileges: Privileges,
):
    revoked = await privileges.revoke(actor=user, user_id=user_id, permission=permission)
    return {"user_id": user_id, "permission": permission, "revoked": revoked}


@router.put("/users/{user_id}/role")
async def change_role(
    user_id: str,
    body: RoleChangeRequest,
    user: PrivilegeManager,
    privileges: Privileges,
):
    updated = await privileges.change_role(actor=user, user_id=user_id, role=body.role)
    return {"user_id": updated.id, "role": updated.role, "is_active": updated.is_active}


@router.put("/users/{user_id}/active")
async def set_active(
    user_id: str,
    body: ActiveChangeRequest,
    user: PrivilegeManager,
    privileges: Privileges,
):
    updated = await privileges.set_active(actor=user, user_id=user_id, is_active=body.is_active)
    return {"user_id": updated.id, "role": updated.role, "is_active": updated.is_active}
