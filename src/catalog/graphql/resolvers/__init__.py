"""Resolver package for the GraphQL schema.

Root query, mutation and subscription fields delegate to the functions in the
sibling modules, which own the database access and authorization checks.
"""
