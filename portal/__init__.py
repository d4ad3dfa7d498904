"""Portal service: role resolution, dashboard redirects and session bootstrap."""
