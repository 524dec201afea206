"""
Inventory library of the operations shared by all API versions
"""
