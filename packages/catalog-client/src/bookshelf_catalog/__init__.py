"""HTTP client for the Bookshelf books / reading-lists / recommendations API."""
