"""
Schemas module - Request/Response schemas for API endpoints.

Schemas are the API contract (what the client sends/receives). Stored
documents stay loosely typed; see alumnisetu.services.store.
"""
