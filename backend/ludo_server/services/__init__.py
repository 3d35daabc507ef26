"""Game domain services: movement, turn order, sessions and bots.

This package holds the game mechanics imported by the Socket.IO handlers,
HTTP routes and CLI, keeping transport concerns separated from the rules.
"""
