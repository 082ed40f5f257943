"""
Service layer abstraction.

Services hold the business logic of a domain and talk to storage only
through the ``MeditationStore`` interface, so API handlers do not
change when the backend does.
"""
