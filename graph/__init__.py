"""Dependency graph model, queries and the project-level facade."""
