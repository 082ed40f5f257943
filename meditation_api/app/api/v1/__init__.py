"""
Version 1 of the API.

This subpackage bundles all endpoints for the first public version of
the Meditation API.  Breaking changes belong in a new version
subpackage (e.g. ``v2``).
"""
