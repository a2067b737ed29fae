"""Pure reconciliation engine: parsing, normalization, aggregation and matching."""
