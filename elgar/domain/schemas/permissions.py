"""Pydantic schemas for permission and privilege endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PermissionGrantResponse(BaseModel):
    user_id: str
    permission: str
    is_active: bool
    granted_by: Optional[str] = None
    granted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GrantRequest(BaseModel):
    permission: str = Field(..., min_length=1)


class PermissionsReplaceRequest(BaseModel):
    permissions: List[str] = Field(default_factory=list)


class RoleChangeRequest(BaseModel):
    role: str = Field(..., min_length=1)


class ActiveChangeRequest(BaseModel):
    is_active: bool


class AvailablePermission(BaseModel):
    key: str
    label: str
    description: str


class NavigationItem(BaseModel):
    text: str
    path: str
    permission: str


class MyPermissionsResponse(BaseModel):
    user_id: str
    role: str
    level: str
    is_super_role: bool
    permissions: List[str]
    navigation: List[NavigationItem]


class ManageableRolesResponse(BaseModel):
    current_role: str
    manageable_roles: List[str]
    can_modify_privileges: bool


class GuardDecisionResponse(BaseModel):
    page: str
    state: str
    redirect_to: Optional[str] = None
