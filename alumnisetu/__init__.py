"""
AlumniSetu
Backend for a university alumni network.

Architecture:
- FastAPI route handlers: validate -> document store call -> JSON
- MongoDB: every entity, schema-less collections
- Approval workflow: user-submitted jobs/events wait for an admin
"""

__version__ = "1.0.0"
