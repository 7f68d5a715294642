"""Configuration, logging, errors and access control."""
