"""
Pydantic schema definitions for the catalog.

Schemas describe the shapes the service layer returns and accepts.
They are kept separate from the stored records (plain dictionaries
from the persistence gateway) and from the GraphQL types.
"""
