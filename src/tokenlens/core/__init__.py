"""Core primitives shared across tokenlens."""
