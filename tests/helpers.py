"""Test doubles shared across test modules."""


class FixedRandom:
    """Random source that always draws the same jitter."""

    def __init__(self, delta: int = 0):
        self.delta = delta
        self.calls = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        assert a <= self.delta <= b
        return self.delta
