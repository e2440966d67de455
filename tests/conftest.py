import re

import pytest

_OPERATION = re.compile(r"(?:query|mutation)\s+(\w+)")


class DummyClient:
    """Stands in for GraphQLClient; answers by operation name."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []
        self.invalidated = []
        self.closed = False

    async def request(self, query, variables=None, ttl=None):
        operation = _OPERATION.search(query).group(1)
        self.calls.append((operation, variables or {}, ttl))
        if operation not in self.responses:
            raise AssertionError(f"Unexpected operation {operation}")
        result = self.responses[operation]
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(variables or {})
        return result

    def invalidate(self, fragment):
        self.invalidated.append(fragment)
        return 0

    async def close(self):
        self.closed = True

    def operations(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def make_client():
    return DummyClient
