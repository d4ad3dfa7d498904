"""
Browser Storage Model

In-memory equivalents of the browser's localStorage / sessionStorage and
the page the code runs on. Redirect and session helpers take these as
explicit arguments instead of reaching for global state.

Classes:
- MemoryStorage: Web Storage semantics (string keys, string values)
- PageContext: current URL plus its local and session storage
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)


class MemoryStorage:
    """
    Dict-backed store mirroring the Web Storage API.

    Values are coerced to str on write, like the browser does.

    Example:
        >>> store = MemoryStorage()
        >>> store.set_item("userRoleId", 1002)
        >>> store.get_item("userRoleId")
        '1002'
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._items: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set_item(key, value)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: Any) -> None:
        self._items[key] = _to_storage_string(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def keys(self) -> List[str]:
        return list(self._items)

    def snapshot(self) -> Dict[str, str]:
        """Copy of the current contents."""
        return dict(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"MemoryStorage({self._items!r})"


def _to_storage_string(value: Any) -> str:
    # Browsers stringify booleans as "true"/"false" and null as "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


@dataclass
class PageContext:
    """
    A page as seen by client-side bootstrap code.

    Attributes:
        url: Full URL of the page (scheme and host included)
        local_storage: Persistent per-origin store
        session_storage: Per-tab store
    """

    url: str
    local_storage: MemoryStorage = field(default_factory=MemoryStorage)
    session_storage: MemoryStorage = field(default_factory=MemoryStorage)

    @property
    def hostname(self) -> str:
        return (urlsplit(self.url).hostname or "").lower()

    @property
    def host(self) -> str:
        return urlsplit(self.url).netloc.lower()

    @property
    def pathname(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def query(self) -> Dict[str, List[str]]:
        return parse_qs(urlsplit(self.url).query, keep_blank_values=True)

    def query_param(self, name: str) -> Optional[str]:
        """First value of a query parameter, like URLSearchParams.get()."""
        values = self.query.get(name)
        return values[0] if values else None
