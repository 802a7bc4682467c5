"""Pure computation used by the API."""
