"""
Login-Success Sniffer

Decides, from nothing but the page URL and browser storage, whether a page
that just finished a login should be sent to a dashboard. It covers the
case where the single-page app has not taken over routing (static hosting,
bundle failed to load).

Decision order:
1. Local hostnames: do nothing.
2. Login page (path contains /login, or ?login_success=true) and the page
   is authenticated or flagged login_success:
   a. stored targetRedirect (safe in-app path)   -> go there
   b. stored currentUser blob                     -> role dashboard,
                                                     /dashboard if unparseable
3. Site root "/":
   a. authenticated with a currentUser blob       -> role dashboard
   b. stored pendingRedirect (safe in-app path)   -> go there, consuming it
4. Authenticated and the path contains a role fragment (/login/admin,
   /manager/login, bare "client", ...)            -> that role's dashboard.
   A bare role word does not fire when the path already lies in that
   role's section; login variants always do.
5. Otherwise no navigation.

Role resolution is shared with the rest of the service
(portal.redirect.dashboards); this module holds no role tables of its own.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from portal.constants import storage_keys as keys
from portal.constants.paths import (
    DEFAULT_DASHBOARD_PATH,
    HOME_PATH,
    LOGIN_PATH_MARKER,
    LOGIN_SUCCESS_PARAM,
    LOGIN_SUCCESS_VALUE,
    ROLE_PATH_FRAGMENTS,
    is_inapp_path,
)
from portal.redirect.dashboards import dashboard_path_for, get_dashboard_path, is_within_section
from portal.redirect.executor import Navigator
from portal.session.storage import PageContext

logger = logging.getLogger(__name__)

# Decision reasons
REASON_LOCAL_HOST = "local_host"
REASON_STORED_TARGET = "stored_target"
REASON_USER_ROLE = "user_role"
REASON_PARSE_ERROR = "parse_error"
REASON_ROOT_ROLE = "root_role"
REASON_PENDING_REDIRECT = "pending_redirect"
REASON_RESUMED_REDIRECT = "resumed_redirect"
REASON_PATH_FRAGMENT = "path_fragment"
REASON_ALREADY_IN_SECTION = "already_in_section"
REASON_NO_MATCH = "no_match"


@dataclass(frozen=True)
class SniffDecision:
    """Outcome of a sniffer run. target is None when nothing should happen."""

    target: Optional[str]
    reason: str

    @property
    def navigates(self) -> bool:
        return self.target is not None


class LoginSuccessSniffer:
    """
    Standalone post-login redirect check for one page.

    Args:
        page: URL and storage of the page being bootstrapped
        local_hostnames: Hostnames where the sniffer stays inactive
            (settings.LOCAL_HOSTNAMES by default)
    """

    def __init__(self, page: PageContext, local_hostnames: Optional[Iterable[str]] = None):
        if local_hostnames is None:
            from portal.core.config import settings
            local_hostnames = settings.LOCAL_HOSTNAMES

        self.page = page
        self.local_hostnames = {name.lower() for name in local_hostnames}

    # ==================== Page Inspection ====================

    @property
    def is_authenticated(self) -> bool:
        return self.page.local_storage.get_item(keys.IS_AUTHENTICATED) == keys.TRUE_VALUE

    @property
    def has_login_success_flag(self) -> bool:
        return self.page.query_param(LOGIN_SUCCESS_PARAM) == LOGIN_SUCCESS_VALUE

    @property
    def is_login_page(self) -> bool:
        return LOGIN_PATH_MARKER in self.page.pathname or self.has_login_success_flag

    # ==================== Decision ====================

    def decide(self) -> SniffDecision:
        """Work out where (if anywhere) to navigate. Pure, never raises."""
        if self.page.hostname in self.local_hostnames:
            return SniffDecision(None, REASON_LOCAL_HOST)

        if self.is_login_page and (self.is_authenticated or self.has_login_success_flag):
            decision = self._decide_after_login()
            if decision is not None:
                return decision

        if self.page.pathname == HOME_PATH:
            decision = self._decide_at_root()
            if decision is not None:
                return decision

        if self.is_authenticated:
            decision = self._decide_from_path()
            if decision is not None:
                return decision

        return SniffDecision(None, REASON_NO_MATCH)

    def _decide_after_login(self) -> Optional[SniffDecision]:
        storage = self.page.local_storage

        target = storage.get_item(keys.TARGET_REDIRECT)
        if target:
            if is_inapp_path(target):
                logger.info(f"Using stored target redirect: {target}")
                return SniffDecision(target, REASON_STORED_TARGET)
            logger.warning(f"Ignoring stored target redirect outside the app: {target!r}")

        blob = storage.get_item(keys.CURRENT_USER)
        if not blob:
            return None

        user = _parse_user_blob(blob)
        if user is None:
            return SniffDecision(DEFAULT_DASHBOARD_PATH, REASON_PARSE_ERROR)

        return SniffDecision(get_dashboard_path(user), REASON_USER_ROLE)

    def _decide_at_root(self) -> Optional[SniffDecision]:
        blob = self.page.local_storage.get_item(keys.CURRENT_USER)
        if self.is_authenticated and blob:
            user = _parse_user_blob(blob)
            if user is None:
                # Unlike the login page, the root page stays put
                return SniffDecision(None, REASON_PARSE_ERROR)
            return SniffDecision(get_dashboard_path(user), REASON_ROOT_ROLE)

        pending = self._pending_redirect()
        if pending:
            logger.info(f"Using stored pending redirect: {pending}")
            return SniffDecision(pending, REASON_PENDING_REDIRECT)
        return None

    def _pending_redirect(self) -> Optional[str]:
        """pendingRedirect from session storage, then local storage."""
        for store in (self.page.session_storage, self.page.local_storage):
            value = store.get_item(keys.PENDING_REDIRECT)
            if not value:
                continue
            if is_inapp_path(value) and value != HOME_PATH:
                return value
            logger.warning(f"Ignoring stored pending redirect: {value!r}")
        return None

    def _decide_from_path(self) -> Optional[SniffDecision]:
        pathname = self.page.pathname
        on_login_page = LOGIN_PATH_MARKER in pathname
        for fragment, role in ROLE_PATH_FRAGMENTS:
            if fragment not in pathname:
                continue
            # /admin/login lies in /admin but must still leave the login page
            if not on_login_page and is_within_section(pathname, role):
                return SniffDecision(None, REASON_ALREADY_IN_SECTION)
            return SniffDecision(dashboard_path_for(role), REASON_PATH_FRAGMENT)
        return None

    # ==================== Execution ====================

    def run(self, navigator: Navigator) -> SniffDecision:
        """
        Decide and, if there is a target, navigate to it.

        A pendingRedirect is consumed (removed from both stores) before the
        navigation so it is followed at most once.
        """
        decision = self.decide()
        if decision.reason == REASON_PENDING_REDIRECT:
            self.page.session_storage.remove_item(keys.PENDING_REDIRECT)
            self.page.local_storage.remove_item(keys.PENDING_REDIRECT)

        if decision.navigates:
            logger.info(f"Sniffer redirect ({decision.reason}): {decision.target}")
            try:
                navigator.assign(decision.target)
            except Exception as e:
                logger.error(f"Sniffer navigation to {decision.target} failed: {e}")
        return decision


def _parse_user_blob(blob: str) -> Optional[Any]:
    """Parse the stored currentUser JSON; None (logged) if it is not an object."""
    try:
        user = json.loads(blob)
    except ValueError as e:
        logger.error(f"Role redirect error: stored user data is not valid JSON ({e})")
        return None

    if not isinstance(user, dict):
        logger.error(f"Role redirect error: stored user data is {type(user).__name__}, expected object")
        return None

    return user
