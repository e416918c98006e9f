"""GraphQL API for the catalog."""
