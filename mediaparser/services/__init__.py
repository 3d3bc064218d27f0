"""
Services layer module.

Parsing, pattern learning and orchestration services.
"""
