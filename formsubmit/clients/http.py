from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class HttpxClientFactory:
    timeout_seconds: float = 30.0
    verify: bool = True

    def new_client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout_seconds, verify=self.verify)
