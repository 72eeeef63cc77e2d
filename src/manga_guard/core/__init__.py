"""Core configuration, role matrix, security helpers and domain errors."""
