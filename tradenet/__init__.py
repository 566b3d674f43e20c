"""Trade network peer services."""
