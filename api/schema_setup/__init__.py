"""
Development-only database and table setup.
"""
