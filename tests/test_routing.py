"""Route guard decisions and navigation that follows the session."""

import pytest

from conftest import LOGIN_PAYLOAD, DeferredRunner, seed_session
from pharmacy_app.models import LoginResult, Role, Session, User
from pharmacy_app.routing import (
    GuardDecision,
    Route,
    Router,
    can_access,
    guard,
    nav_items,
)
from pharmacy_app.services.session_manager import SessionState


def session_for(role: Role) -> Session:
    return Session(token="t", user=User(user_id=1, email="u@x.com", name="U", role=role), issued_at_ms=0)


class TestGuard:
    @pytest.mark.parametrize("state", [SessionState.UNINITIALIZED, SessionState.RESTORING])
    def test_loading_while_undecided(self, state):
        assert guard(state, None) is GuardDecision.LOADING

    def test_anonymous_redirects_to_login(self):
        assert guard(SessionState.ANONYMOUS, None) is GuardDecision.REDIRECT_LOGIN

    def test_role_outside_requirement(self):
        decision = guard(SessionState.AUTHENTICATED, session_for(Role.CASHIER), [Role.ADMIN])
        assert decision is GuardDecision.REDIRECT_UNAUTHORIZED

    def test_allowed(self):
        decision = guard(SessionState.AUTHENTICATED, session_for(Role.ADMIN), [Role.ADMIN])
        assert decision is GuardDecision.ALLOW

    def test_no_requirement_allows_any_role(self):
        assert guard(SessionState.AUTHENTICATED, session_for(Role.CASHIER)) is GuardDecision.ALLOW


class TestRoleAccess:
    def test_cashier_routes(self):
        assert [item.route for item in nav_items(Role.CASHIER)] == [Route.DASHBOARD, Route.MEDICINES, Route.SALES]

    def test_pharmacist_has_no_users_page(self):
        routes = [item.route for item in nav_items(Role.PHARMACIST)]
        assert Route.USERS not in routes
        assert Route.REPORTS in routes

    def test_admin_sees_everything(self):
        assert len(nav_items(Role.ADMIN)) == 7
        assert nav_items(Role.ADMIN)[0].route is Route.DASHBOARD

    def test_public_routes(self):
        assert can_access(None, Route.LOGIN) is True
        assert can_access(None, Route.DASHBOARD) is False

    def test_unknown_route_falls_back_to_dashboard(self):
        assert Route.parse("nowhere") is Route.DASHBOARD


class TestRouter:
    def test_request_during_restore_is_held_until_settled(self, store, make_manager):
        seed_session(store)
        manager = make_manager()
        router = Router(manager)
        routes = []
        router.route_changed.connect(routes.append)

        assert router.navigate(Route.SALES) is None
        assert router.pending_route is Route.SALES

        manager.restore()

        assert routes == ["sales"]
        assert router.pending_route is None

    def test_held_request_goes_to_login_without_session(self, make_manager):
        manager = make_manager()
        router = Router(manager)
        router.navigate(Route.DASHBOARD)

        manager.restore()

        assert router.current_route is Route.LOGIN

    def test_role_mismatch_goes_to_unauthorized(self, store, make_manager):
        seed_session(store, user={"userId": 2, "email": "c@x.com", "name": "C", "role": "CASHIER"})
        manager = make_manager()
        manager.restore()
        router = Router(manager)

        assert router.navigate(Route.USERS) is Route.UNAUTHORIZED

    def test_login_route_while_authenticated_goes_to_dashboard(self, store, make_manager):
        seed_session(store)
        manager = make_manager()
        manager.restore()
        router = Router(manager)

        assert router.navigate(Route.LOGIN) is Route.DASHBOARD

    def test_logout_navigates_to_login(self, store, make_manager):
        seed_session(store)
        manager = make_manager()
        router = Router(manager)
        router.navigate(Route.MEDICINES)
        manager.restore()
        assert router.current_route is Route.MEDICINES

        manager.logout()

        assert router.current_route is Route.LOGIN

    def test_invalidation_navigates_to_login(self, store, make_manager):
        seed_session(store)
        manager = make_manager()
        manager.restore()
        router = Router(manager)
        router.navigate(Route.REPORTS)

        manager.invalidate("Token expired")

        assert router.current_route is Route.LOGIN

    def test_login_moves_from_login_to_dashboard(self, make_manager):
        runner = DeferredRunner()
        manager = make_manager(runner=runner)
        router = Router(manager)
        manager.restore()
        assert router.current_route is Route.LOGIN

        manager.login("a@x.com", "secret")
        runner.resolve(0, LoginResult.from_api(LOGIN_PAYLOAD))

        assert router.current_route is Route.DASHBOARD

    def test_same_route_is_not_emitted_twice(self, store, make_manager):
        seed_session(store)
        manager = make_manager()
        manager.restore()
        router = Router(manager)
        routes = []
        router.route_changed.connect(routes.append)

        router.navigate(Route.DASHBOARD)
        router.navigate(Route.DASHBOARD)

        assert routes == ["dashboard"]
