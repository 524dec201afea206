"""
Inventory core REST API with its versioned sub-APIs
"""
