"""Fake push connection — records sent frames for testing."""

from notifications.channel.push_port import ConnectionClosed, PushConnection


class FakePushConnection(PushConnection):
    """Push connection that records frames in memory for test assertions."""

    def __init__(self):
        self.sent_frames: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
        self._closed = False

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push delivery failed"):
        """Configure the fake connection behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, frame: dict) -> None:
        if self._closed:
            raise ConnectionClosed("Connection closed")
        if not self.should_succeed:
            raise RuntimeError(self.failure_reason)
        self.sent_frames.append(frame)

    def close(self) -> None:
        self._closed = True

    @property
    def payloads(self) -> list[dict]:
        """Bodies of the MESSAGE frames received so far."""
        return [f["body"] for f in self.sent_frames if f.get("command") == "MESSAGE"]
