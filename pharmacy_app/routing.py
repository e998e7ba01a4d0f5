"""Routes, role requirements and the route guard."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from pharmacy_app.models import ALL_ROLES, Role, Session
from pharmacy_app.services.session_manager import SessionManager, SessionState

logger = logging.getLogger(__name__)


class Route(str, Enum):
    LOGIN = "login"
    UNAUTHORIZED = "unauthorized"
    DASHBOARD = "dashboard"
    MEDICINES = "medicines"
    SALES = "sales"
    SUPPLIERS = "suppliers"
    PURCHASES = "purchases"
    REPORTS = "reports"
    USERS = "users"

    @classmethod
    def parse(cls, value: "Route | str") -> "Route":
        try:
            return cls(value)
        except ValueError:
            return cls.DASHBOARD


class GuardDecision(str, Enum):
    LOADING = "loading"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_UNAUTHORIZED = "redirect_unauthorized"
    ALLOW = "allow"


PUBLIC_ROUTES: frozenset[Route] = frozenset({Route.LOGIN, Route.UNAUTHORIZED})

MANAGEMENT_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.PHARMACIST})

ROUTE_ROLES: dict[Route, frozenset[Role]] = {
    Route.DASHBOARD: ALL_ROLES,
    Route.MEDICINES: ALL_ROLES,
    Route.SALES: ALL_ROLES,
    Route.SUPPLIERS: MANAGEMENT_ROLES,
    Route.PURCHASES: MANAGEMENT_ROLES,
    Route.REPORTS: MANAGEMENT_ROLES,
    Route.USERS: frozenset({Role.ADMIN}),
}

ROUTE_TITLES: dict[Route, str] = {
    Route.DASHBOARD: "Dashboard",
    Route.MEDICINES: "Medicines",
    Route.SUPPLIERS: "Suppliers",
    Route.SALES: "Sales",
    Route.PURCHASES: "Purchases",
    Route.REPORTS: "Reports",
    Route.USERS: "Users",
}

# Sidebar order.
NAV_ORDER: tuple[Route, ...] = (
    Route.DASHBOARD,
    Route.MEDICINES,
    Route.SUPPLIERS,
    Route.SALES,
    Route.PURCHASES,
    Route.REPORTS,
    Route.USERS,
)


@dataclass(slots=True, frozen=True)
class NavItem:
    route: Route
    label: str


def guard(
    state: SessionState,
    session: Session | None,
    required_roles: Iterable[Role] | None = None,
) -> GuardDecision:
    """Decide whether a protected view may render for the given session."""
    if state in (SessionState.UNINITIALIZED, SessionState.RESTORING):
        return GuardDecision.LOADING
    if state is not SessionState.AUTHENTICATED or session is None:
        return GuardDecision.REDIRECT_LOGIN
    if required_roles is not None and session.user.role not in frozenset(required_roles):
        return GuardDecision.REDIRECT_UNAUTHORIZED
    return GuardDecision.ALLOW


def can_access(role: Role | None, route: Route) -> bool:
    if route in PUBLIC_ROUTES:
        return True
    return role is not None and role in ROUTE_ROLES.get(route, frozenset())


def nav_items(role: Role | None) -> list[NavItem]:
    if role is None:
        return []
    return [NavItem(route, ROUTE_TITLES[route]) for route in NAV_ORDER if can_access(role, route)]


class Router(QObject):
    """Tracks the current view and follows session state changes.

    Entering ANONYMOUS from anywhere but the login view navigates to login;
    entering AUTHENTICATED while on login navigates to the dashboard. A
    request made while the session is still restoring is held until the
    state settles.
    """

    route_changed = pyqtSignal(str)

    def __init__(self, session_manager: SessionManager, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._session_manager = session_manager
        self._current: Route | None = None
        self._pending: Route | None = None
        self._session_manager.state_changed.connect(self._on_state_changed)

    @property
    def current_route(self) -> Route | None:
        return self._current

    @property
    def pending_route(self) -> Route | None:
        return self._pending

    def resolve(self, route: Route | str) -> Route | None:
        target = Route.parse(route)
        state = self._session_manager.state
        if target is Route.LOGIN:
            return Route.DASHBOARD if state is SessionState.AUTHENTICATED else Route.LOGIN
        if target is Route.UNAUTHORIZED:
            return target

        decision = guard(state, self._session_manager.session, ROUTE_ROLES[target])
        if decision is GuardDecision.LOADING:
            return None
        if decision is GuardDecision.REDIRECT_LOGIN:
            return Route.LOGIN
        if decision is GuardDecision.REDIRECT_UNAUTHORIZED:
            return Route.UNAUTHORIZED
        return target

    def navigate(self, route: Route | str) -> Route | None:
        resolved = self.resolve(route)
        if resolved is None:
            self._pending = Route.parse(route)
            return None
        self._pending = None
        if resolved is not self._current:
            logger.debug("Navigating to %s", resolved.value)
            self._current = resolved
            self.route_changed.emit(resolved.value)
        return resolved

    def _on_state_changed(self, state_value: str) -> None:
        state = SessionState(state_value)
        if state is SessionState.RESTORING:
            return
        if self._pending is not None:
            self.navigate(self._pending)
            return
        if state is SessionState.ANONYMOUS and self._current is not Route.LOGIN:
            self.navigate(Route.LOGIN)
        elif state is SessionState.AUTHENTICATED and self._current in (None, Route.LOGIN):
            self.navigate(Route.DASHBOARD)
