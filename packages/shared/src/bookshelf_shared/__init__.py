"""Shared infrastructure for the Bookshelf client.

Provides settings loading, the exception taxonomy, and the Pydantic models
that flow between the identity adapter, auth state, API client and views.
"""
