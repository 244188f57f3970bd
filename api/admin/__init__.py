"""
Admin-only reporting and search.
"""
