"""
Services Package

- user_directory: in-memory user store
- auth_service: login, current user, token refresh
"""
