"""
Configuration loading and validation for settings.

Provides strongly typed settings objects for the default calendar, directory
scanning and logging, loaded from environment variables with upfront validation.
"""
