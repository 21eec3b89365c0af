"""
Property Marketplace API.
"""
