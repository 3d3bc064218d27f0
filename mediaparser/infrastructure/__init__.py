"""
Infrastructure layer module.

Database, repositories, AI integration and in-process collaborators.
"""
