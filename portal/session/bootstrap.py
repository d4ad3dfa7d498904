"""
Session Bootstrap

Client-side session bookkeeping around login, logout and page load:

- build_login_storage / persist_login: the localStorage writes a successful
  login performs (user blob, auth flag, tokens, role hints, and in deployed
  environments the targetRedirect the sniffer consumes)
- clear_session: the keys removed at logout
- resume_failed_redirect: picks up a fallbackRedirect left by a failed
  navigation and retries it a bounded number of times
- bootstrap_page: what runs on every page load; resume first, otherwise
  the login-success sniffer
"""

import json
import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional

from portal.constants import storage_keys as keys
from portal.constants.paths import is_inapp_path
from portal.redirect.executor import Navigator, RedirectExecutor
from portal.redirect.normalizer import extract_role_indicator, normalize_role, resolve_role_id
from portal.redirect.sniffer import REASON_RESUMED_REDIRECT, LoginSuccessSniffer, SniffDecision
from portal.session.storage import MemoryStorage, PageContext

logger = logging.getLogger(__name__)


# ============================================================================
# Login
# ============================================================================

def build_login_storage(
    user: Mapping[str, Any],
    redirect_url: str,
    access_token: Optional[str] = None,
    refresh_token: Optional[str] = None,
    is_deployed_env: bool = False,
    now_ms: Optional[int] = None
) -> Dict[str, str]:
    """
    Compute the localStorage entries written after a successful login.

    Args:
        user: Public user record (as returned by the login endpoint)
        redirect_url: Dashboard the user is being sent to
        access_token: Optional access token to persist
        refresh_token: Optional refresh token to persist
        is_deployed_env: Also persist login tracking and targetRedirect
        now_ms: Login time in epoch milliseconds (defaults to now)

    Returns:
        Mapping of storage key -> string value
    """
    role = normalize_role(user)
    entries: Dict[str, str] = {
        keys.CURRENT_USER: json.dumps(dict(user)),
        keys.IS_AUTHENTICATED: keys.TRUE_VALUE,
        keys.USER_ROLE: role.role_name,
    }

    if access_token:
        entries[keys.ACCESS_TOKEN] = access_token
    if refresh_token:
        entries[keys.REFRESH_TOKEN] = refresh_token

    indicator = extract_role_indicator(user)
    if indicator is not None:
        entries[keys.USER_ROLE_ID] = str(indicator)
    elif role.is_known:
        entries[keys.USER_ROLE_ID] = str(int(role))

    numeric = resolve_role_id(user)
    if numeric is not None:
        entries[keys.USER_NUMERIC_ROLE_ID] = str(numeric)

    if is_deployed_env:
        entries[keys.LOGIN_TIMESTAMP] = str(now_ms if now_ms is not None else int(time.time() * 1000))
        entries[keys.LOGIN_STATUS] = keys.LOGIN_STATUS_SUCCESS
        entries[keys.TARGET_REDIRECT] = redirect_url

    return entries


def persist_login(store: MemoryStorage, user: Mapping[str, Any], redirect_url: str, **kwargs) -> Dict[str, str]:
    """Write build_login_storage() entries into store and return them."""
    entries = build_login_storage(user, redirect_url, **kwargs)
    for key, value in entries.items():
        store.set_item(key, value)
    logger.info(f"Persisted login for role {entries[keys.USER_ROLE]} (redirect {redirect_url})")
    return entries


# ============================================================================
# Logout
# ============================================================================

def clear_session(store: MemoryStorage) -> List[str]:
    """
    Remove every auth-related key from store.

    Returns:
        Keys that were actually present
    """
    removed = [key for key in keys.AUTH_KEYS if key in store]
    for key in keys.AUTH_KEYS:
        store.remove_item(key)
    return removed


# ============================================================================
# Failed Redirect Recovery
# ============================================================================

def _attempts(store: MemoryStorage) -> int:
    raw = store.get_item(keys.FALLBACK_REDIRECT_ATTEMPTS)
    try:
        return int(raw) if raw is not None else 0
    except ValueError:
        return 0


def _drop_markers(page: PageContext) -> None:
    page.local_storage.remove_item(keys.FALLBACK_REDIRECT)
    page.local_storage.remove_item(keys.FALLBACK_REDIRECT_ATTEMPTS)
    page.session_storage.remove_item(keys.FAILED_REDIRECT)


def resume_failed_redirect(
    page: PageContext,
    executor: RedirectExecutor,
    max_attempts: Optional[int] = None,
    is_deployed_env: bool = False
) -> Optional[str]:
    """
    Retry a redirect that failed on a previous load.

    A failed navigation leaves fallbackRedirect in localStorage and reloads
    the page. On the next load this re-runs the executor for that URL, up to
    max_attempts times; after that the markers are dropped so a persistently
    failing environment stops reloading.

    Args:
        page: Page being bootstrapped
        executor: RedirectExecutor bound to the page's storage
        max_attempts: Retry budget (settings.MAX_REDIRECT_RESUME_ATTEMPTS)
        is_deployed_env: Passed through to the executor

    Returns:
        The URL retried, or None
    """
    if max_attempts is None:
        from portal.core.config import settings
        max_attempts = settings.MAX_REDIRECT_RESUME_ATTEMPTS

    local = page.local_storage
    url = local.get_item(keys.FALLBACK_REDIRECT)
    if not url:
        return None

    if not is_inapp_path(url):
        logger.warning(f"Dropping failed redirect outside the app: {url!r}")
        _drop_markers(page)
        return None

    attempts = _attempts(local)
    if attempts >= max_attempts:
        logger.error(f"Giving up on redirect to {url} after {attempts} attempts")
        _drop_markers(page)
        return None

    local.set_item(keys.FALLBACK_REDIRECT_ATTEMPTS, attempts + 1)
    local.remove_item(keys.FALLBACK_REDIRECT)
    logger.info(f"Resuming failed redirect to {url} (attempt {attempts + 1}/{max_attempts})")

    if executor.perform(url, is_deployed_env=is_deployed_env):
        local.remove_item(keys.FALLBACK_REDIRECT_ATTEMPTS)
        page.session_storage.remove_item(keys.FAILED_REDIRECT)

    return url


# ============================================================================
# Page Bootstrap
# ============================================================================

def bootstrap_page(
    page: PageContext,
    navigator: Navigator,
    is_deployed_env: bool = False,
    max_attempts: Optional[int] = None,
    local_hostnames: Optional[Iterable[str]] = None
) -> SniffDecision:
    """
    Run the page-load redirect checks for one page.

    A redirect that failed on a previous load is resumed first; only when
    there is none does the login-success sniffer get to decide.

    Returns:
        The decision taken (reason "resumed_redirect" for a resumed one)
    """
    executor = RedirectExecutor(navigator, page.session_storage, page.local_storage)
    resumed = resume_failed_redirect(page, executor, max_attempts=max_attempts, is_deployed_env=is_deployed_env)
    if resumed is not None:
        return SniffDecision(resumed, REASON_RESUMED_REDIRECT)

    return LoginSuccessSniffer(page, local_hostnames=local_hostnames).run(navigator)
