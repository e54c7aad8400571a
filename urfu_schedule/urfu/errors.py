class ScheduleError(Exception):
    """Base error for everything that can go wrong while loading a schedule."""


class NetworkError(ScheduleError):
    """The request never produced a response (DNS, connect, timeout, protocol)."""


class DecodeError(ScheduleError):
    """The response body is not JSON or does not have the expected shape."""

    def __init__(self, message: str, status_code: int | None = None):
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)
        self.status_code = status_code
