"""
Pydantic schema definitions for API payloads and stored records.

Each domain (users, chapters, memberships) defines its request model
and its record model.  Field names are snake_case in Python and keep
the column names (``Chapter_Name``, ``User_ID``, ...) as aliases, so
rows read from the database validate directly and responses use the
same names clients send.
"""
