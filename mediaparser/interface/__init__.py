"""
Interface layer module.

HTTP API exposing parsing and pattern management.
"""
