"""
HTTP layer for the game client.

Thin FastAPI router: parses requests, calls the services and maps error kinds
to status codes. No game rules live here.
"""
