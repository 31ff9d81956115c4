"""
StubTap

In-memory stub matching engine for request/response mocking.
"""

__version__ = '1.0.0'
