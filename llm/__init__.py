"""Shared toolkit: exceptions, env loading, YAML prompt parsing."""
