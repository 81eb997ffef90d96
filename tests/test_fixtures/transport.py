"""httpx transport stub standing in for the primary's forwarding endpoint."""

import httpx


class RecordingTransport(httpx.MockTransport):
    """
    MockTransport that records every request it receives.

    status: HTTP status to answer with
    fail: raise httpx.ConnectError instead of answering
    """

    def __init__(self, status: int = 200, fail: bool = False):
        self.requests: list[httpx.Request] = []
        self.status = status
        self.fail = fail
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status, json={"success": self.status < 400})
