"""Configuration, logging, security, errors and persistence."""
