"""Auth state and form validation for the Bookshelf client."""
