"""
Role-Redirect Script Tests

The standalone script must carry the same tables the Python sniffer uses
and follow the same page-load order.

Run: pytest portal/tests/test_script.py -v
"""

import json


def _embedded_config(script):
    start = script.rindex("})(") + 3
    end = script.rindex(");")
    return json.loads(script[start:end])


def _function_body(script, name):
    start = script.index(f"function {name}(")
    end = script.index("\n  }\n", start)
    return script[start:end]


def test_config_matches_python_tables():
    from portal.constants.paths import DASHBOARD_PATHS, ROLE_PATH_FRAGMENTS
    from portal.constants.roles import LEGACY_ROLE_TOKENS
    from portal.redirect.script import render_role_redirect_script

    config = _embedded_config(render_role_redirect_script(local_hostnames=["localhost"], max_resume_attempts=2))

    assert config["dashboards"] == {str(int(role)): path for role, path in DASHBOARD_PATHS.items()}
    assert config["legacyTokens"] == {token: int(role) for token, role in LEGACY_ROLE_TOKENS.items()}
    assert [tuple(item) for item in config["fragments"]] == [(f, int(r)) for f, r in ROLE_PATH_FRAGMENTS]
    assert config["defaultPath"] == "/dashboard"
    assert config["homePath"] == "/"
    assert config["failureReportPath"] == "/api/redirect/failures"
    assert config["maxResumeAttempts"] == 2
    assert config["keys"]["pendingRedirect"] == "pendingRedirect"
    assert config["keys"]["fallbackRedirectAttempts"] == "fallbackRedirectAttempts"


def test_settings_feed_the_script(monkeypatch):
    from portal.redirect.script import render_role_redirect_script

    monkeypatch.setenv("LOCAL_HOSTNAMES", "localhost,dev.local")
    monkeypatch.setenv("MAX_REDIRECT_RESUME_ATTEMPTS", "5")

    config = _embedded_config(render_role_redirect_script())

    assert config["localHosts"] == ["localhost", "dev.local"]
    assert config["maxResumeAttempts"] == 5


def test_local_hostnames_are_lowercased_and_cached():
    from portal.redirect.script import render_role_redirect_script

    first = render_role_redirect_script(local_hostnames=["LocalHost", "127.0.0.1"], max_resume_attempts=2)

    assert _embedded_config(first)["localHosts"] == ["localhost", "127.0.0.1"]
    assert render_role_redirect_script(local_hostnames=("LocalHost", "127.0.0.1"), max_resume_attempts=2) is first


def test_failed_redirect_is_cleared_after_reporting():
    from portal.redirect.script import render_role_redirect_script

    body = _function_body(render_role_redirect_script(local_hostnames=["localhost"], max_resume_attempts=2), "resumeFailedRedirect")

    assert body.index("sendBeacon(") < body.index("ls.removeItem(config.keys.fallbackRedirect)")
    assert "dropFailedRedirect()" in body
    assert "config.maxResumeAttempts" in body


def test_table_lookups_ignore_inherited_keys():
    from portal.redirect.script import render_role_redirect_script

    body = _function_body(render_role_redirect_script(local_hostnames=["localhost"], max_resume_attempts=2), "resolveRole")

    assert "own(config.legacyTokens, id)" in body
    assert "own(config.roleNames," in body
    assert "config.legacyTokens[" not in body
    assert "config.roleNames[" not in body


def test_role_login_pages_bypass_section_guard():
    from portal.redirect.script import render_role_redirect_script

    body = _function_body(render_role_redirect_script(local_hostnames=["localhost"], max_resume_attempts=2), "decide")

    assert "if (!onLoginPage && inSection(path, config.fragments[j][1])) { return null; }" in body
    assert "if (path === config.homePath) {" in body


def test_inapp_pattern_round_trips():
    import re
    from portal.constants.paths import INAPP_PATH_PATTERN
    from portal.redirect.script import build_script_config

    pattern = re.compile(build_script_config(("localhost",), 2)["inappPattern"])

    assert pattern.pattern == INAPP_PATH_PATTERN.pattern
    assert pattern.match("/custom/path")
    assert not pattern.match("//evil.example")
