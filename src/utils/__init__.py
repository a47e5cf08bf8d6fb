"""
Utility package for the Electricity Price API.
"""
