"""Repository interfaces."""
