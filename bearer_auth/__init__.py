# bearer_auth/__init__.py
"""
Bearer token authentication core.

Creates, validates, renews and revokes opaque bearer tokens that stand in for a
server-side authenticator record kept in a pluggable backing store.
"""

__version__ = "0.1.0"
