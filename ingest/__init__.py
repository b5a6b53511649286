"""
Ingest package: GitHub and WordPress.org transports.
"""
