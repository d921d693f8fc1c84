"""
Auth System

Resolves the calling user's id from the bearer token on each request.
"""
