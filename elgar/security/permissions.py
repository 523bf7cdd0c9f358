"""Role-permission table. Static, immutable, no I/O."""

from types import MappingProxyType
from typing import Mapping

WILDCARD = "*"

ROLE_DEVELOPER = "מפתח"
ROLE_ADMIN = "אדמין"
ROLE_LEGACY_ADMIN = "admin"
ROLE_UNIT_COMMAND = "פיקוד יחידה"
ROLE_CONTROL_COMMANDER = 'מפקד משל"ט'
ROLE_DISPATCHER = "מוקדן"
ROLE_PATROL = "סייר"

SUPER_ROLES: frozenset[str] = frozenset({ROLE_DEVELOPER, ROLE_ADMIN, ROLE_LEGACY_ADMIN})

# Tokens referenced by the workflow and guards.
VIEW_DASHBOARD_EVENTS = "view_dashboard_events"
VIEW_USERS_INFO = "view_users_info"
VIEW_EVENTS_LIST = "view_events_list"
ACCESS_USERS_CRUD = "access_users_crud"
ACCESS_EVENTS_CRUD = "access_events_crud"
ACCESS_EVENTS_DELETE = "access_events_delete"
ACCESS_ANALYTICS = "access_analytics"
MANAGE_OWN_ACTION_REPORTS = "manage_own_action_reports"
ACCESS_ACTION_REPORTS = "access_action_reports"
ACCESS_SUMMARIES = "access_summaries"
VIEW_OWN_SUMMARIES = "view_own_summaries"
CAN_MODIFY_PRIVILEGES = "can_modify_privileges"
CAN_CONNECT_TO_WEBSITE = "can_connect_to_website"
WEBSITE_ACCESS = "גישה לאתר"
VEHICLE_USE_SYSTEM = "vehicle_use_system"
VEHICLE_SEARCH_ACCESS = "vehicle_search_access"

_ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    ROLE_DEVELOPER: frozenset({WILDCARD}),
    ROLE_ADMIN: frozenset({WILDCARD}),
    ROLE_LEGACY_ADMIN: frozenset({WILDCARD}),
    ROLE_UNIT_COMMAND: frozenset({
        ACCESS_USERS_CRUD,
        ACCESS_EVENTS_CRUD,
        ACCESS_EVENTS_DELETE,
        ACCESS_ANALYTICS,
        ACCESS_SUMMARIES,
        ACCESS_ACTION_REPORTS,
        CAN_MODIFY_PRIVILEGES,
        CAN_CONNECT_TO_WEBSITE,
        WEBSITE_ACCESS,
        VIEW_DASHBOARD_EVENTS,
        VIEW_EVENTS_LIST,
        VIEW_USERS_INFO,
        MANAGE_OWN_ACTION_REPORTS,
    }),
    ROLE_CONTROL_COMMANDER: frozenset({
        ACCESS_EVENTS_CRUD,
        ACCESS_EVENTS_DELETE,
        ACCESS_ANALYTICS,
        ACCESS_SUMMARIES,
        ACCESS_ACTION_REPORTS,
        CAN_CONNECT_TO_WEBSITE,
        WEBSITE_ACCESS,
        VIEW_DASHBOARD_EVENTS,
        VIEW_EVENTS_LIST,
        VIEW_USERS_INFO,
        MANAGE_OWN_ACTION_REPORTS,
    }),
    ROLE_DISPATCHER: frozenset({
        ACCESS_EVENTS_CRUD,
        CAN_CONNECT_TO_WEBSITE,
        WEBSITE_ACCESS,
        VIEW_DASHBOARD_EVENTS,
        VIEW_EVENTS_LIST,
        VIEW_USERS_INFO,
        MANAGE_OWN_ACTION_REPORTS,
    }),
    ROLE_PATROL: frozenset({
        WEBSITE_ACCESS,
        CAN_CONNECT_TO_WEBSITE,
        VIEW_DASHBOARD_EVENTS,
        VIEW_USERS_INFO,
        MANAGE_OWN_ACTION_REPORTS,
    }),
}

ROLE_PERMISSIONS: Mapping[str, frozenset[str]] = MappingProxyType(_ROLE_PERMISSIONS)

# Page -> tokens; any one of them opens the page.
PAGE_PERMISSIONS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "dashboard": (VIEW_DASHBOARD_EVENTS,),
    "users": (VIEW_USERS_INFO, ACCESS_USERS_CRUD),
    "events": (VIEW_EVENTS_LIST, ACCESS_EVENTS_CRUD),
    "analytics": (ACCESS_ANALYTICS,),
    "action-reports": (MANAGE_OWN_ACTION_REPORTS, ACCESS_ACTION_REPORTS),
    "summaries": (VIEW_OWN_SUMMARIES, ACCESS_SUMMARIES),
    "settings": (CAN_MODIFY_PRIVILEGES,),
    "vehicles": (VEHICLE_USE_SYSTEM, VEHICLE_SEARCH_ACCESS),
})

# (label, path, token) in display order.
NAVIGATION: tuple[tuple[str, str, str], ...] = (
    ("לוח בקרה", "/dashboard", VIEW_DASHBOARD_EVENTS),
    ("משתמשים", "/users", VIEW_USERS_INFO),
    ("אירועים", "/events", VIEW_EVENTS_LIST),
    ("אנליטיקה", "/analytics", ACCESS_ANALYTICS),
    ("דוחות פעולה", "/action-reports", MANAGE_OWN_ACTION_REPORTS),
    ("סיכומים", "/summaries", ACCESS_SUMMARIES),
    ("הגדרות", "/settings", CAN_MODIFY_PRIVILEGES),
)

# Role -> roles whose privileges it may modify.
ROLE_HIERARCHY: Mapping[str, tuple[str, ...]] = MappingProxyType({
    ROLE_DEVELOPER: (ROLE_ADMIN, ROLE_UNIT_COMMAND, ROLE_CONTROL_COMMANDER, ROLE_DISPATCHER, ROLE_PATROL),
    ROLE_ADMIN: (ROLE_UNIT_COMMAND, ROLE_CONTROL_COMMANDER, ROLE_DISPATCHER, ROLE_PATROL),
    ROLE_LEGACY_ADMIN: (ROLE_UNIT_COMMAND, ROLE_CONTROL_COMMANDER, ROLE_DISPATCHER, ROLE_PATROL),
    ROLE_UNIT_COMMAND: (ROLE_CONTROL_COMMANDER, ROLE_DISPATCHER, ROLE_PATROL),
    ROLE_CONTROL_COMMANDER: (ROLE_DISPATCHER, ROLE_PATROL),
    ROLE_DISPATCHER: (),
    ROLE_PATROL: (),
})

PERMISSION_LEVELS: Mapping[str, str] = MappingProxyType({
    ROLE_DEVELOPER: "developer",
    ROLE_ADMIN: "admin",
    ROLE_LEGACY_ADMIN: "admin",
    ROLE_UNIT_COMMAND: "unit_command",
    ROLE_CONTROL_COMMANDER: "controller",
    ROLE_DISPATCHER: "dispatcher",
})

# Grantable tokens shown in the privileges dialog: token -> (label, description).
AVAILABLE_PERMISSIONS: Mapping[str, tuple[str, str]] = MappingProxyType({
    ACCESS_USERS_CRUD: ("ניהול משתמשים", "יצירה, עריכה, שינוי ומחיקה של משתמשים"),
    ACCESS_EVENTS_CRUD: ("ניהול אירועים", "יצירה, עריכה, שינוי, הקצאה ומחיקה של אירועים"),
    ACCESS_ANALYTICS: ("גישה לאנליטיקה", "צפייה בדף האנליטיקה והדוחות"),
    ACCESS_SUMMARIES: ("גישה לסיכומים", "צפייה בדף הסיכומים והסטטיסטיקות"),
    ACCESS_ACTION_REPORTS: ("בדיקת דוחות פעולה", "צפייה ובדיקה של דוחות פעולה"),
    CAN_MODIFY_PRIVILEGES: ("שינוי הרשאות", "יכולת לשנות הרשאות למשתמשים אחרים"),
    VEHICLE_USE_SYSTEM: ("מערכת רכבים", "שימוש במערכת הרכבים"),
    VEHICLE_SEARCH_ACCESS: ("חיפוש רכבים", "חיפוש במאגר הרכבים"),
})


def permissions_for(role: str | None) -> frozenset[str]:
    """Default tokens for a role. Roles are compared as exact strings; unknown roles get nothing."""
    if not role:
        return frozenset()
    return ROLE_PERMISSIONS.get(role, frozenset())
