"""
Session Package

Browser storage model and login/logout bookkeeping.

Import bootstrap helpers from portal.session.bootstrap directly; this
package only re-exports the storage model so redirect modules can depend on
it without import cycles.
"""

from portal.session.storage import MemoryStorage, PageContext

__all__ = ["MemoryStorage", "PageContext"]
