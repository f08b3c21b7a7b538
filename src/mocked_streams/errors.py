from __future__ import annotations


class MockedStreamsError(Exception):
    # Base class for caller-usage errors raised by the harness before any run.
    pass


class NoInputSpecified(MockedStreamsError):
    def __init__(self) -> None:
        super().__init__("No input records specified; call input(...) before reading output or state")


class ExpectedOutputIsEmpty(MockedStreamsError):
    def __init__(self, size: int) -> None:
        super().__init__(f"Expected output size must be positive, got {size}")
        self.size = size


class TopologyNotSpecified(MockedStreamsError):
    def __init__(self, operation: str) -> None:
        super().__init__(f"No topology specified; call topology(...) before {operation}(...)")
        self.operation = operation
