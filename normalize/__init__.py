"""
Normalize package: identity models and raw payload helpers.
"""
