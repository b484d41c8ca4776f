"""HTTP API for the business overview engine."""
