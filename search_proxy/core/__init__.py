"""Configuration, logging and exception types shared across the service."""
