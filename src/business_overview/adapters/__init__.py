"""Collaborator adapters: HTTP clients, in-memory stores and exporters."""
