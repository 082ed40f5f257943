"""
Pydantic schema definitions for API payloads and stored records.

Request bodies (``MeditationCreate``, ``MeditationUpdate``) are kept
separate from the stored ``Meditation`` record so that identifiers and
ownership are never taken from client-supplied JSON.
"""
