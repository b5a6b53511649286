"""
Report package: props rendering.
"""
