"""
Plumbing every feature package leans on: the settings object, the asyncpg
pool wrapper and the HTTP error mapping. Nothing sponsor-specific lives here.
"""
