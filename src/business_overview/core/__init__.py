"""Pure derivation layer: models, scoring, aggregation and services."""
