"""Configuration loading and shared constants."""
