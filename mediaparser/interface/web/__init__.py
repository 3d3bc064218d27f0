"""
Web interface module.

Flask application factory and API blueprints.
"""
