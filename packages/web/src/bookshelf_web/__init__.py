"""View controllers and application wiring for the Bookshelf client."""
