"""Use-case layer for the discovery-to-query pipeline.

Each module coordinates domain objects and ports without performing transport
I/O directly.
"""
