"""
Domain layer for Gardien.
"""
