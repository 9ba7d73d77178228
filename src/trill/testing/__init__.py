"""Test utilities for trill applications::

    from trill.testing import TestClient
"""

from trill.testing.client import TestClient

__all__ = ["TestClient"]
