"""
Tools Package

External collaborator clients.

- telemetry_client: redirect failure reports (httpx, connection pooled)

Clients are not imported eagerly: `from portal.tools import telemetry_client`.
"""
