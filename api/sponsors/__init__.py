"""
Sponsor and family-member registration.
"""
