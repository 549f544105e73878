"""Core rules engine package for Klondike solitaire."""

__all__ = [
    "stacks",
    "cards",
    "deck",
    "table",
    "rules",
    "moves",
    "autofinish",
    "collaborators",
    "config",
    "encode",
    "game",
    "service",
]
