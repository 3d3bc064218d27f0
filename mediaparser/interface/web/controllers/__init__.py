"""
Web controllers.
"""
