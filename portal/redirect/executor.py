"""
Redirect Executor

Performs a navigation to a resolved path, with an extra delayed attempt in
deployed environments where a single navigation may silently not take
effect (embedding iframes, hosted previews).

Flow:
- Record the target under sessionStorage["pendingRedirect"]
- Local: navigator.assign(url)
- Deployed: navigator.assign(url), then unconditionally schedule
  navigator.replace(url) after a short delay. Navigating twice to the same
  URL is harmless.
- If navigation raises: write failedRedirect (session) and
  fallbackRedirect (local), then reload the page. The next bootstrap picks
  fallbackRedirect up (see portal.session.bootstrap.resume_failed_redirect).

perform() never raises.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from time import monotonic
from typing import Any, Callable, List, Optional

from portal.constants import storage_keys as keys
from portal.session.storage import MemoryStorage

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], Any]


# ============================================================================
# Navigators
# ============================================================================

class Navigator(ABC):
    """The three window.location operations the executor relies on."""

    @abstractmethod
    def assign(self, url: str) -> None:
        """Navigate, adding a history entry."""

    @abstractmethod
    def replace(self, url: str) -> None:
        """Navigate without adding a history entry."""

    @abstractmethod
    def reload(self) -> None:
        """Reload the current page."""


@dataclass
class NavigationCall:
    method: str
    url: Optional[str]
    at: float


@dataclass
class RecordingNavigator(Navigator):
    """
    Navigator that records calls instead of performing them.

    Used server-side to turn an executor run into an HTTP redirect, and by
    tests.
    """

    calls: List[NavigationCall] = field(default_factory=list)

    def assign(self, url: str) -> None:
        self.calls.append(NavigationCall("assign", url, monotonic()))

    def replace(self, url: str) -> None:
        self.calls.append(NavigationCall("replace", url, monotonic()))

    def reload(self) -> None:
        self.calls.append(NavigationCall("reload", None, monotonic()))

    @property
    def last_url(self) -> Optional[str]:
        for call in reversed(self.calls):
            if call.url is not None:
                return call.url
        return None

    @property
    def reloaded(self) -> bool:
        return any(call.method == "reload" for call in self.calls)


# ============================================================================
# Scheduling
# ============================================================================

def default_scheduler(delay: float, callback: Callable[[], None]) -> Any:
    """
    Run callback after delay seconds.

    Uses the running event loop when there is one, otherwise a daemon
    timer thread.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
    return loop.call_later(delay, callback)


# ============================================================================
# Executor
# ============================================================================

class RedirectExecutor:
    """
    Navigate to a target path with layered fallbacks.

    Args:
        navigator: Performs the actual navigation
        session_storage: Receives pendingRedirect / failedRedirect
        local_storage: Receives fallbackRedirect
        scheduler: Runs the delayed second attempt (default_scheduler)
        fallback_delay_ms: Delay before the second attempt (settings default)
    """

    def __init__(
        self,
        navigator: Navigator,
        session_storage: MemoryStorage,
        local_storage: MemoryStorage,
        scheduler: Optional[Scheduler] = None,
        fallback_delay_ms: Optional[int] = None
    ):
        if fallback_delay_ms is None:
            from portal.core.config import settings
            fallback_delay_ms = settings.REDIRECT_FALLBACK_DELAY_MS

        self.navigator = navigator
        self.session_storage = session_storage
        self.local_storage = local_storage
        self.scheduler = scheduler or default_scheduler
        self.fallback_delay = fallback_delay_ms / 1000.0

    def perform(self, url: str, is_deployed_env: bool = False) -> bool:
        """
        Navigate to url.

        Args:
            url: Target path
            is_deployed_env: Schedule a delayed replace() as a second attempt

        Returns:
            True if navigation was issued, False if it failed and the page
            was reloaded instead
        """
        logger.info(f"Redirecting to {url}" + (" (deployed environment)" if is_deployed_env else ""))

        try:
            self.session_storage.set_item(keys.PENDING_REDIRECT, url)
            self.navigator.assign(url)
            if is_deployed_env:
                self.scheduler(self.fallback_delay, lambda: self._delayed_replace(url))
            return True
        except Exception as e:
            logger.error(f"Redirect to {url} failed: {e}")
            self._record_failure(url)
            self._reload()
            return False

    def _delayed_replace(self, url: str) -> None:
        try:
            self.navigator.replace(url)
        except Exception as e:
            logger.warning(f"Delayed redirect to {url} failed: {e}")

    def _record_failure(self, url: str) -> None:
        try:
            self.session_storage.set_item(keys.FAILED_REDIRECT, url)
            self.local_storage.set_item(keys.FALLBACK_REDIRECT, url)
        except Exception as e:
            logger.error(f"Could not record failed redirect to {url}: {e}")

    def _reload(self) -> None:
        try:
            self.navigator.reload()
        except Exception as e:
            logger.error(f"Reload after failed redirect also failed: {e}")
