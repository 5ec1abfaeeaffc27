"""Domain services and service interfaces."""
