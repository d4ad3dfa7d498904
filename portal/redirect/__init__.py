"""
Redirect Package

Role resolution and post-login navigation.

Modules:
- normalizer: user record -> Role
- dashboards: Role -> dashboard path
- executor: navigation with deployed-environment fallbacks
- sniffer: standalone post-login redirect decision
- script: browser rendition of the sniffer, generated from the same tables
"""

from portal.redirect.normalizer import normalize_role, resolve_role_id, parse_int_prefix
from portal.redirect.dashboards import dashboard_path_for, get_dashboard_path
from portal.redirect.executor import Navigator, RecordingNavigator, RedirectExecutor
from portal.redirect.sniffer import LoginSuccessSniffer, SniffDecision

__all__ = [
    "normalize_role",
    "resolve_role_id",
    "parse_int_prefix",
    "dashboard_path_for",
    "get_dashboard_path",
    "Navigator",
    "RecordingNavigator",
    "RedirectExecutor",
    "LoginSuccessSniffer",
    "SniffDecision",
]
