"""
Rent reconciliation package.

This package provides modular components for:
- Parsing tenant and payment statements into raw row tables
- Normalizing payments and tenants into canonical records
- Aggregating payments by payer and matching them against expected rent
- Exporting, fetching and storing reconciliation runs
"""

__version__ = "1.0.0"
