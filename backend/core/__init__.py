"""Core business logic and domain rules."""
