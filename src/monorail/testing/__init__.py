"""Test utilities for monorail applications::

    from monorail.testing import TestClient
"""

from monorail.testing.client import TestClient, TestResponse

__all__ = [
    "TestClient",
    "TestResponse",
]
