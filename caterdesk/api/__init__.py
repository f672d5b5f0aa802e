"""
CaterDesk HTTP API.
"""
