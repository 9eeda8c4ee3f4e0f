"""Static constants."""
