"""
Top-level package for the Meditation API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``meditation_api.app.main:app``.
"""

__all__ = []
