"""Authentication and rate limiting for the HTTP backend."""
