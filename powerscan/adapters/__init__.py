"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (device HTTP API,
    multicast DNS discovery, and offline test doubles) used by use cases.

Dependencies:
    Individual submodules depend on ``requests``, ``zeroconf``, and domain
    protocol definitions.

Call context:
    Imported by the CLI composition root (for runtime wiring) and by tests
    (for fakes and transport-level behavior verification).
"""
