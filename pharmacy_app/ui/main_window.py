"""Main application window."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from functools import partial
from typing import Any

from PyQt6.QtWidgets import QDialog, QFrame, QHBoxLayout, QMainWindow, QStackedWidget, QVBoxLayout, QWidget

from pharmacy_app.api.client import PharmacyApiClient
from pharmacy_app.api.errors import AuthFailure, ConnectivityFailure, describe_error
from pharmacy_app.api.interceptor import AuthInterceptor
from pharmacy_app.config import AppConfig
from pharmacy_app.routing import Route, Router, nav_items
from pharmacy_app.services.dashboard import load_dashboard_stats
from pharmacy_app.services.notifier import Notifier
from pharmacy_app.services.session_manager import SessionManager, SessionState
from pharmacy_app.services.session_store import PersistentStore
from pharmacy_app.ui.dashboard_view import DashboardView
from pharmacy_app.ui.login_view import LoginView
from pharmacy_app.ui.pages import RESOURCE_PAGES, ResourcePage
from pharmacy_app.ui.record_dialog import RecordFormDialog
from pharmacy_app.ui.reports_view import ReportsView
from pharmacy_app.ui.resource_view import ResourceView
from pharmacy_app.ui.unauthorized_view import UnauthorizedView
from pharmacy_app.ui.widgets import NoticeBanner, Sidebar
from pharmacy_app.workers import BackgroundRunner

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, config: AppConfig, parent=None) -> None:
        super().__init__(parent)
        self.config = config
        self.interceptor = AuthInterceptor(parent=self)
        self.client = PharmacyApiClient(
            base_url=config.api_base_url,
            timeout_seconds=config.timeout_seconds,
            interceptor=self.interceptor,
        )
        self.store = PersistentStore(config.storage_path)
        self.notifier = Notifier(self)
        self.runner = BackgroundRunner()
        self.session_manager = SessionManager(
            store=self.store,
            client=self.client,
            runner=self.runner,
            notifier=self.notifier,
            ttl_ms=config.session_ttl_ms,
            check_interval_ms=config.expiry_check_interval_ms,
            parent=self,
        )
        self.router = Router(self.session_manager, parent=self)

        self.setWindowTitle("Pharmacy Management System")
        self.setMinimumSize(980, 680)
        self._build_ui()
        self._connect_signals()

        # The first view is decided only after the stored session is examined.
        self.router.navigate(Route.DASHBOARD)
        self.session_manager.restore()

    def _build_ui(self) -> None:
        self.stack = QStackedWidget()
        self.login_view = LoginView()
        self.stack.addWidget(self.login_view)

        self.shell = QWidget()
        shell_layout = QHBoxLayout(self.shell)
        shell_layout.setContentsMargins(14, 14, 14, 14)
        shell_layout.setSpacing(14)

        self.sidebar = Sidebar()
        shell_layout.addWidget(self.sidebar, 0)

        main_panel = QFrame()
        main_panel.setObjectName("MainPanel")
        main_layout = QVBoxLayout(main_panel)
        main_layout.setContentsMargins(16, 16, 16, 16)
        main_layout.setSpacing(12)

        self.pages = QStackedWidget()
        self.dashboard_view = DashboardView()
        self.reports_view = ReportsView()
        self.unauthorized_view = UnauthorizedView()
        self.resource_views: dict[Route, ResourceView] = {
            page.route: ResourceView(page) for page in RESOURCE_PAGES
        }
        self.route_widgets: dict[Route, QWidget] = {
            Route.DASHBOARD: self.dashboard_view,
            Route.REPORTS: self.reports_view,
            Route.UNAUTHORIZED: self.unauthorized_view,
            **self.resource_views,
        }
        for widget in self.route_widgets.values():
            self.pages.addWidget(widget)
        main_layout.addWidget(self.pages, 1)

        shell_layout.addWidget(main_panel, 1)
        self.stack.addWidget(self.shell)
        self.stack.setCurrentWidget(self.login_view)

        # Notices sit above the stack so they show on the login page too.
        root = QWidget()
        root_layout = QVBoxLayout(root)
        root_layout.setContentsMargins(0, 0, 0, 0)
        root_layout.setSpacing(0)
        self.notice_banner = NoticeBanner()
        root_layout.addWidget(self.notice_banner, 0)
        root_layout.addWidget(self.stack, 1)
        self.setCentralWidget(root)

    def _connect_signals(self) -> None:
        self.notifier.notice_posted.connect(self.notice_banner.show_notice)
        self.interceptor.connectivity_failed.connect(self.notifier.warning)

        self.session_manager.state_changed.connect(self._on_session_state_changed)
        self.session_manager.login_failed.connect(self._on_login_failed)
        self.session_manager.login_finished.connect(lambda: self.login_view.set_busy(False))
        self.session_manager.login_succeeded.connect(lambda _session: self.login_view.reset())
        self.session_manager.session_invalidated.connect(self.login_view.show_info)

        self.router.route_changed.connect(self._show_route)

        self.login_view.login_submitted.connect(self._on_login_submitted)
        self.sidebar.navigate_requested.connect(self.router.navigate)
        self.sidebar.logout_requested.connect(self.session_manager.logout)
        self.unauthorized_view.home_requested.connect(lambda: self.router.navigate(Route.DASHBOARD))

        self.dashboard_view.refresh_requested.connect(self.refresh_dashboard)
        self.reports_view.refresh_requested.connect(self.refresh_reports)
        self.reports_view.expiring_days_changed.connect(lambda _days: self.refresh_reports())
        for view in self.resource_views.values():
            view.refresh_requested.connect(partial(self.refresh_resource, view))
            view.create_requested.connect(partial(self._open_record_dialog, view, None))
            view.edit_requested.connect(partial(self._on_edit_requested, view))
            view.delete_requested.connect(partial(self._on_delete_requested, view))

    def _run_for_session(
        self,
        fn: Callable[[], Any],
        *,
        on_result: Callable[[Any], None],
        on_error: Callable[[Exception], None],
        on_finished: Callable[[], None] | None = None,
    ) -> None:
        """Run ``fn`` in the background and drop its outcome if the session changed meanwhile."""
        generation = self.session_manager.generation

        def _guard(callback: Callable[[Any], None], value: Any) -> None:
            if generation != self.session_manager.generation:
                logger.debug("Dropping result of a request from an ended session")
                return
            callback(value)

        self.runner.run(
            fn,
            on_result=partial(_guard, on_result),
            on_error=partial(_guard, on_error),
            on_finished=on_finished,
        )

    def _on_login_submitted(self, email: str, password: str) -> None:
        self.login_view.clear_info()
        self.login_view.set_busy(True)
        self.session_manager.login(email, password)

    def _on_login_failed(self, error: Exception) -> None:
        self.login_view.show_error(describe_error(error))

    def _on_session_state_changed(self, state_value: str) -> None:
        state = SessionState(state_value)
        user = self.session_manager.user
        role = user.role if user else None
        self.sidebar.set_user(user, nav_items(role))
        self.sidebar.set_active(self.router.current_route)
        self.dashboard_view.set_user(user)
        for view in self.resource_views.values():
            view.set_role(role)
        if state is SessionState.ANONYMOUS:
            for view in self.resource_views.values():
                view.set_records([])

    def _show_route(self, route_value: str) -> None:
        route = Route(route_value)
        if route is Route.LOGIN:
            self.stack.setCurrentWidget(self.login_view)
            return

        self.stack.setCurrentWidget(self.shell)
        self.pages.setCurrentWidget(self.route_widgets[route])
        self.sidebar.set_active(route)
        if route is Route.DASHBOARD:
            self.refresh_dashboard()
        elif route is Route.REPORTS:
            self.refresh_reports()
        elif route in self.resource_views:
            self.refresh_resource(self.resource_views[route])

    def _show_view_error(self, view: Any, error: Exception) -> None:
        # Auth and connectivity failures are already surfaced by the interceptor.
        if isinstance(error, (AuthFailure, ConnectivityFailure)):
            view.set_status_message("", is_error=False)
            return
        view.set_status_message(describe_error(error), is_error=True)

    def refresh_dashboard(self) -> None:
        user = self.session_manager.user
        if user is None:
            return
        self.dashboard_view.set_loading(True, "Loading dashboard...")

        def on_success(stats) -> None:
            self.dashboard_view.set_stats(stats)
            self.dashboard_view.set_status_message(
                f"Updated at {datetime.now().strftime('%H:%M:%S')}",
                is_error=False,
            )

        self._run_for_session(
            partial(load_dashboard_stats, self.client, user.role),
            on_result=on_success,
            on_error=partial(self._show_view_error, self.dashboard_view),
            on_finished=lambda: self.dashboard_view.set_loading(False),
        )

    def refresh_reports(self) -> None:
        if not self.session_manager.is_authenticated:
            return
        days = self.reports_view.expiring_days
        self.reports_view.set_loading(True, "Loading reports...")

        def task() -> dict[str, Any]:
            return {
                "stock": self.client.get_stock_report(),
                "expired": self.client.get_expiry_report(),
                "expiring": self.client.get_expiring_medicines(days=days),
            }

        def on_success(result: dict[str, Any]) -> None:
            self.reports_view.set_reports(**result)
            self.reports_view.set_status_message("", is_error=False)

        self._run_for_session(
            task,
            on_result=on_success,
            on_error=partial(self._show_view_error, self.reports_view),
            on_finished=lambda: self.reports_view.set_loading(False),
        )

    def refresh_resource(self, view: ResourceView) -> None:
        if not self.session_manager.is_authenticated:
            return
        view.set_loading(True, f"Loading {view.page.title.lower()}...")

        def on_success(records: list[Any]) -> None:
            view.set_records(records)
            view.set_status_message("", is_error=False)

        self._run_for_session(
            partial(view.page.fetch, self.client),
            on_result=on_success,
            on_error=partial(self._show_view_error, view),
            on_finished=lambda: view.set_loading(False),
        )

    def _on_edit_requested(self, view: ResourceView, record: Any) -> None:
        self._open_record_dialog(view, record)

    def _open_record_dialog(self, view: ResourceView, record: Any | None) -> None:
        page = view.page
        view.set_loading(True, "Preparing form...")

        def on_options(options: dict[str, list[tuple[str, Any]]]) -> None:
            view.set_loading(False)
            self._show_record_dialog(view, page, record, options)

        def on_error(error: Exception) -> None:
            view.set_loading(False)
            self._show_view_error(view, error)

        self._run_for_session(partial(page.load_options, self.client), on_result=on_options, on_error=on_error)

    def _show_record_dialog(
        self,
        view: ResourceView,
        page: ResourcePage,
        record: Any | None,
        options: dict[str, list[tuple[str, Any]]],
    ) -> None:
        editing = record is not None
        values = page.record_values(record) if editing and page.record_values else None
        title = f"Edit {page.title.lower()}" if editing else page.create_label
        dialog = RecordFormDialog(title, page.form_fields, options=options, values=values, parent=self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        payload = dialog.payload()

        if editing:
            record_id = page.record_id(record)
            task = partial(page.update, self.client, record_id, payload)
        else:
            task = partial(page.create, self.client, payload)
        self._save_record(view, task, "Record updated." if editing else "Record created.")

    def _on_delete_requested(self, view: ResourceView, record: Any) -> None:
        page = view.page
        if page.delete is None:
            return
        self._save_record(view, partial(page.delete, self.client, page.record_id(record)), "Record deleted.")

    def _save_record(self, view: ResourceView, task: Callable[[], Any], message: str) -> None:
        view.set_loading(True, "Saving...")
        saved: list[bool] = []

        def on_success(_: Any) -> None:
            saved.append(True)
            self.notifier.success(message)

        def on_error(error: Exception) -> None:
            if not isinstance(error, (AuthFailure, ConnectivityFailure)):
                self.notifier.error(describe_error(error))
            self._show_view_error(view, error)

        def on_finished() -> None:
            view.set_loading(False)
            if saved:
                self.refresh_resource(view)

        self._run_for_session(task, on_result=on_success, on_error=on_error, on_finished=on_finished)

    def closeEvent(self, event) -> None:  # noqa: N802
        self.session_manager.shutdown()
        super().closeEvent(event)
