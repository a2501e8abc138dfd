"""HTTP backend for the audience assistant."""
