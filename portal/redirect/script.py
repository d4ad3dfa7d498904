"""
Standalone Role-Redirect Script

Renders the browser script served at /role-redirect.js. It runs before (and
independently of) the single-page app bundle and applies the same decision
order as portal.session.bootstrap.bootstrap_page: resume a failed redirect,
otherwise run the login-success sniffer.

The role tables are not duplicated by hand: they are serialized from the
Python constants into the script's config block, so both sides always agree.
The rendered script is cached per settings combination.
"""

import json
from functools import lru_cache
from typing import Any, Dict, Tuple

from portal.constants import storage_keys as keys
from portal.constants.paths import (
    DASHBOARD_PATHS,
    DEFAULT_DASHBOARD_PATH,
    HOME_PATH,
    INAPP_PATH_PATTERN,
    LOGIN_PATH_MARKER,
    LOGIN_SUCCESS_PARAM,
    LOGIN_SUCCESS_VALUE,
    ROLE_PATH_FRAGMENTS,
    ROLE_SECTIONS,
)
from portal.constants.roles import LEGACY_ROLE_TOKENS, ROLE_NAMES, USERNAME_ROLE_HINTS

FAILURE_REPORT_PATH = "/api/redirect/failures"

_SCRIPT_TEMPLATE = """\
// Role redirect - standalone script (generated, do not edit)
(function (config) {
  var ls = window.localStorage;
  var ss = window.sessionStorage;
  var inapp = new RegExp(config.inappPattern);

  function own(table, key) {
    return Object.prototype.hasOwnProperty.call(table, key) ? table[key] : null;
  }

  function parseIntPrefix(value) {
    var n = parseInt(value, 10);
    if (/^\\s*[+-]?0[xX]/.test(value)) { n = parseInt(value, 16); }
    return isNaN(n) ? null : n;
  }

  function resolveRole(user) {
    if (!user || typeof user !== 'object' || Array.isArray(user)) { return null; }
    var id = user.roleId;
    if ((id === undefined || id === null) && user.role && typeof user.role === 'object') { id = user.role.id; }
    if (typeof id === 'number') { return id; }
    if (typeof id === 'string') {
      var parsed = parseIntPrefix(id);
      if (parsed !== null) { return parsed; }
      if (own(config.legacyTokens, id) !== null) { return own(config.legacyTokens, id); }
    }
    var name = typeof user.roleName === 'string' ? user.roleName : null;
    if (name === null && user.role && typeof user.role === 'object' && typeof user.role.name === 'string') { name = user.role.name; }
    if (name === null && typeof user.role === 'string') { name = user.role; }
    if (name !== null && own(config.roleNames, name.trim().toLowerCase()) !== null) {
      return own(config.roleNames, name.trim().toLowerCase());
    }
    if (typeof user.username === 'string') {
      var username = user.username.toLowerCase();
      for (var i = 0; i < config.usernameHints.length; i++) {
        if (username.indexOf(config.usernameHints[i][0]) !== -1) { return config.usernameHints[i][1]; }
      }
    }
    return null;
  }

  function parseUser(blob) {
    var user = JSON.parse(blob);
    if (!user || typeof user !== 'object' || Array.isArray(user)) { throw new Error('stored user data is not an object'); }
    return user;
  }

  function dashboardFor(roleId) {
    return own(config.dashboards, String(roleId)) || config.defaultPath;
  }

  function inSection(path, roleId) {
    var section = own(config.sections, String(roleId));
    return !!section && (path === section || path.indexOf(section + '/') === 0);
  }

  function pendingRedirect() {
    var stores = [ss, ls];
    for (var i = 0; i < stores.length; i++) {
      var value = stores[i].getItem(config.keys.pendingRedirect);
      if (value && inapp.test(value) && value !== config.homePath) { return value; }
    }
    return null;
  }

  function decide() {
    if (config.localHosts.indexOf(window.location.hostname.toLowerCase()) !== -1) { return null; }
    var path = window.location.pathname;
    var params = new URLSearchParams(window.location.search);
    var loginSuccess = params.get(config.loginSuccessParam) === config.loginSuccessValue;
    var authenticated = ls.getItem(config.keys.isAuthenticated) === 'true';
    var onLoginPage = path.indexOf(config.loginMarker) !== -1;
    var blob = ls.getItem(config.keys.currentUser);

    if ((onLoginPage || loginSuccess) && (authenticated || loginSuccess)) {
      var target = ls.getItem(config.keys.targetRedirect);
      if (target && inapp.test(target)) { return target; }
      if (blob) {
        try {
          return dashboardFor(resolveRole(parseUser(blob)));
        } catch (e) {
          console.error('Role redirect error:', e);
          return config.defaultPath;
        }
      }
    }

    if (path === config.homePath) {
      if (authenticated && blob) {
        try {
          return dashboardFor(resolveRole(parseUser(blob)));
        } catch (e) {
          console.error('Role redirect error:', e);
          return null;
        }
      }
      var pending = pendingRedirect();
      if (pending) {
        ss.removeItem(config.keys.pendingRedirect);
        ls.removeItem(config.keys.pendingRedirect);
        return pending;
      }
    }

    if (authenticated) {
      for (var j = 0; j < config.fragments.length; j++) {
        if (path.indexOf(config.fragments[j][0]) !== -1) {
          if (!onLoginPage && inSection(path, config.fragments[j][1])) { return null; }
          return dashboardFor(config.fragments[j][1]);
        }
      }
    }
    return null;
  }

  function dropFailedRedirect() {
    ls.removeItem(config.keys.fallbackRedirect);
    ls.removeItem(config.keys.fallbackRedirectAttempts);
    ss.removeItem(config.keys.failedRedirect);
  }

  function resumeFailedRedirect() {
    var failed = ls.getItem(config.keys.fallbackRedirect);
    if (!failed) {
      ls.removeItem(config.keys.fallbackRedirectAttempts);
      return null;
    }
    if (navigator.sendBeacon) {
      var body = JSON.stringify({ url: failed, page: window.location.pathname });
      navigator.sendBeacon(config.failureReportPath, new Blob([body], { type: 'application/json' }));
    }
    var attempts = parseInt(ls.getItem(config.keys.fallbackRedirectAttempts), 10) || 0;
    if (!inapp.test(failed) || attempts >= config.maxResumeAttempts) {
      dropFailedRedirect();
      return null;
    }
    ls.removeItem(config.keys.fallbackRedirect);
    ls.setItem(config.keys.fallbackRedirectAttempts, String(attempts + 1));
    return failed;
  }

  var destination = resumeFailedRedirect() || decide();
  if (destination) { window.location.href = destination; }
})(__CONFIG__);
"""


def build_script_config(local_hostnames: Tuple[str, ...], max_resume_attempts: int) -> Dict[str, Any]:
    """Serializable snapshot of the role/path tables the script needs."""
    return {
        "dashboards": {str(int(role)): path for role, path in DASHBOARD_PATHS.items()},
        "sections": {str(int(role)): section for role, section in ROLE_SECTIONS.items()},
        "defaultPath": DEFAULT_DASHBOARD_PATH,
        "homePath": HOME_PATH,
        "legacyTokens": {token: int(role) for token, role in LEGACY_ROLE_TOKENS.items()},
        "roleNames": {name: int(role) for role, name in ROLE_NAMES.items()},
        "usernameHints": [[hint, int(role)] for hint, role in USERNAME_ROLE_HINTS],
        "fragments": [[fragment, int(role)] for fragment, role in ROLE_PATH_FRAGMENTS],
        "loginMarker": LOGIN_PATH_MARKER,
        "loginSuccessParam": LOGIN_SUCCESS_PARAM,
        "loginSuccessValue": LOGIN_SUCCESS_VALUE,
        "inappPattern": INAPP_PATH_PATTERN.pattern,
        "localHosts": [name.lower() for name in local_hostnames],
        "failureReportPath": FAILURE_REPORT_PATH,
        "maxResumeAttempts": max_resume_attempts,
        "keys": {
            "isAuthenticated": keys.IS_AUTHENTICATED,
            "targetRedirect": keys.TARGET_REDIRECT,
            "currentUser": keys.CURRENT_USER,
            "pendingRedirect": keys.PENDING_REDIRECT,
            "fallbackRedirect": keys.FALLBACK_REDIRECT,
            "fallbackRedirectAttempts": keys.FALLBACK_REDIRECT_ATTEMPTS,
            "failedRedirect": keys.FAILED_REDIRECT,
        },
    }


@lru_cache(maxsize=8)
def _render(local_hostnames: Tuple[str, ...], max_resume_attempts: int) -> str:
    config = json.dumps(build_script_config(local_hostnames, max_resume_attempts), sort_keys=True)
    return _SCRIPT_TEMPLATE.replace("__CONFIG__", config)


def render_role_redirect_script(local_hostnames=None, max_resume_attempts=None) -> str:
    """
    Render the standalone role-redirect script.

    Args:
        local_hostnames: Hostnames where the sniffer stays inactive
            (settings.LOCAL_HOSTNAMES by default)
        max_resume_attempts: Retry budget for a failed redirect
            (settings.MAX_REDIRECT_RESUME_ATTEMPTS by default)
    """
    if local_hostnames is None or max_resume_attempts is None:
        from portal.core.config import settings
        if local_hostnames is None:
            local_hostnames = settings.LOCAL_HOSTNAMES
        if max_resume_attempts is None:
            max_resume_attempts = settings.MAX_REDIRECT_RESUME_ATTEMPTS
    return _render(tuple(local_hostnames), int(max_resume_attempts))
