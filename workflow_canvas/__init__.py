"""Workflow canvas engine: graph model, format conversion and backend client."""
