"""
Generic utility functions shared across modules.

Includes clock abstractions for "now" and logging setup.
"""
