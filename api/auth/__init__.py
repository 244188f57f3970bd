"""
Google sign-in, session tokens and the route gates built on them.
"""
