"""Field-reference documents and runtime configuration for the audience assistant."""
