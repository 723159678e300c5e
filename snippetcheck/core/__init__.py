"""Core data structures and pipeline stages."""
