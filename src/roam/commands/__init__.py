"""
Roam CLI Commands

Each module exposes ``register_parsers(subparsers)`` and ``cmd_*``
handlers returning JSON-serializable dicts.
"""
