"""
CaterDesk Test Suite

Tests are organized into:
- unit/: Unit tests for controllers, auth, uploads and storage backends
- integration/: Integration tests for the HTTP API
"""
