"""
Household inventory core REST API

This package serves categories, articles and their lots as well as
stocktaking sessions and barcode lookups via a versioned HTTP API.
"""

__version__ = "3.0.0"
