"""
API gateway package.

A declarative reverse proxy forwarding public routes to the backend API.
"""
