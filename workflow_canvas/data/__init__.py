"""Bundled sample workflows."""
