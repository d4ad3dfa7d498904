"""
Core Configuration Module

Centralizes environment configuration for the portal service.
Provides a singleton Settings object with defaults suitable for local
development.

Usage:
    from portal.core.config import settings

    print(settings.APP_ENV)
    print(settings.DEPLOYED_HOST_PATTERNS)
"""

import os
from typing import List, Optional

from portal.constants.constants import (
    DEFAULT_REDIRECT_FALLBACK_DELAY_MS,
    DEFAULT_MAX_REDIRECT_RESUME_ATTEMPTS,
    ACCESS_TOKEN_TTL_MINUTES,
    REFRESH_TOKEN_TTL_DAYS,
)


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """
    Application settings loaded from environment variables.

    Properties are read on every access so tests can monkeypatch the
    environment without rebuilding the singleton.
    """

    # ==================== Application Settings ====================

    @property
    def APP_ENV(self) -> str:
        """Application environment: dev, staging, production"""
        return os.getenv("APP_ENV", "dev")

    @property
    def LOG_LEVEL(self) -> str:
        """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""
        return os.getenv("LOG_LEVEL", "INFO")

    # ==================== Redirect Settings ====================

    @property
    def DEPLOYED_HOST_PATTERNS(self) -> List[str]:
        """Host substrings that mark a deployed (hosted/embedded) environment"""
        return _split_csv(os.getenv("DEPLOYED_HOST_PATTERNS", ".replit.app,.replit.dev,aditeke.com"))

    @property
    def LOCAL_HOSTNAMES(self) -> List[str]:
        """Hostnames on which the login-success sniffer stays inactive"""
        return _split_csv(os.getenv("LOCAL_HOSTNAMES", "localhost"))

    @property
    def REDIRECT_FALLBACK_DELAY_MS(self) -> int:
        """Delay before the second navigation attempt in deployed environments"""
        return int(os.getenv("REDIRECT_FALLBACK_DELAY_MS", str(DEFAULT_REDIRECT_FALLBACK_DELAY_MS)))

    @property
    def MAX_REDIRECT_RESUME_ATTEMPTS(self) -> int:
        """How many times a failed redirect is retried at bootstrap"""
        return int(os.getenv("MAX_REDIRECT_RESUME_ATTEMPTS", str(DEFAULT_MAX_REDIRECT_RESUME_ATTEMPTS)))

    # ==================== Security Settings ====================

    @property
    def JWT_SECRET(self) -> Optional[str]:
        """JWT signing secret (a random per-process secret is used when unset)"""
        return os.getenv("JWT_SECRET")

    @property
    def JWT_ALGORITHM(self) -> str:
        """JWT algorithm for token signing and validation"""
        return os.getenv("JWT_ALGORITHM", "HS256")

    @property
    def ACCESS_TOKEN_TTL_MINUTES(self) -> int:
        return int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", str(ACCESS_TOKEN_TTL_MINUTES)))

    @property
    def REFRESH_TOKEN_TTL_DAYS(self) -> int:
        return int(os.getenv("REFRESH_TOKEN_TTL_DAYS", str(REFRESH_TOKEN_TTL_DAYS)))

    @property
    def DEMO_USER_PASSWORD(self) -> Optional[str]:
        """When set, seed admin/manager/client demo users with this password"""
        return os.getenv("DEMO_USER_PASSWORD")

    # ==================== Telemetry Settings ====================

    @property
    def TELEMETRY_URL(self) -> Optional[str]:
        """Endpoint receiving redirect failure reports (optional)"""
        return os.getenv("TELEMETRY_URL")

    @property
    def TELEMETRY_CLIENT_TIMEOUT(self) -> float:
        """Telemetry client timeout in seconds"""
        return float(os.getenv("TELEMETRY_CLIENT_TIMEOUT", "5.0"))

    # ==================== CORS Settings ====================

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Allowed CORS origins"""
        origins_str = os.getenv("CORS_ORIGINS", "*")
        if origins_str == "*":
            return ["*"]
        return _split_csv(origins_str)

    @property
    def CORS_ALLOW_CREDENTIALS(self) -> bool:
        """Allow credentials in CORS requests"""
        return os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"


# ==================== Singleton Instance ====================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the singleton Settings instance.

    Example:
        >>> from portal.core.config import get_settings
        >>> get_settings().APP_ENV
        'dev'
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


# Convenience singleton for direct import
settings = get_settings()


# ==================== Helper Functions ====================

def is_production() -> bool:
    """True if APP_ENV is 'production' or 'prod'"""
    env = settings.APP_ENV.lower()
    return env in ("production", "prod")


def is_deployed_host(host: Optional[str], patterns: Optional[List[str]] = None) -> bool:
    """
    Check whether a request host belongs to a deployed environment.

    A deployed environment is one where a single navigation call may not
    take effect (hosted previews, embedding iframes, the public domain).

    Args:
        host: Host header value, with or without port
        patterns: Host substrings to match (defaults to settings)

    Example:
        >>> is_deployed_host("my-app.replit.app")
        True
        >>> is_deployed_host("localhost:5000")
        False
    """
    if not host:
        return False
    if patterns is None:
        patterns = settings.DEPLOYED_HOST_PATTERNS
    lowered = host.lower()
    return any(pattern.lower() in lowered for pattern in patterns)
