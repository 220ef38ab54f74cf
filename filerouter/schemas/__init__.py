"""
Pydantic schemas for the JSON bodies the routing layer produces.

Route modules keep their own request schemas next to the route or in a
module of this package (see ``schemas.messages``).
"""
