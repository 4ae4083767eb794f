"""
Pydantic schema definitions for API payloads.

Schemas are kept apart from the SQL rows they are built from so that
the wire format can evolve independently of the table layout.
"""
