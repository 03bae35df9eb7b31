"""Configuration, errors, validation and application lifecycle."""
