"""HTTP client for the WaitHuman confirmations API."""

from __future__ import annotations

import json
import logging
from urllib.parse import quote

import aiohttp

from waithuman.errors import WaitHumanHTTPError, WaitHumanProtocolError
from waithuman.models import ConfirmationAnswer, ConfirmationQuestion, parse_confirmation_answer

log = logging.getLogger("waithuman")


class ConfirmationsClient:
    """The two remote calls: create a confirmation, then fetch its answer.

    Transport failures surface as `aiohttp.ClientError` / `asyncio.TimeoutError`;
    non-success responses as `WaitHumanHTTPError`; malformed bodies as
    `WaitHumanProtocolError`. Classifying them is the engine's job.
    """

    def __init__(self, endpoint: str, api_key: str):
        self.endpoint = endpoint.rstrip("/")
        self._api_key = api_key

    def _make_url(self, path: str) -> str:
        return f"{self.endpoint}{path}"

    def _headers(self) -> dict[str, str]:
        # The service expects the raw key, no "Bearer" prefix.
        return {"Authorization": self._api_key, "Accept": "application/json"}

    async def request_json(
        self, session: aiohttp.ClientSession, method: str, url: str, **kwargs
    ) -> object | None:
        async with session.request(method, url, headers=self._headers(), **kwargs) as resp:
            raw = await resp.read()
            log.debug(f"{method} {url} -> HTTP {resp.status}")
            if not 200 <= resp.status < 300:
                detail = raw.decode("utf-8", errors="replace").strip()
                raise WaitHumanHTTPError(
                    resp.status,
                    method=method,
                    url=url,
                    reason=resp.reason,
                    detail=detail or resp.reason,
                )
            if not raw:
                return None
            try:
                return json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise WaitHumanProtocolError(
                    "response body is not UTF-8 JSON",
                    payload_preview=raw[:200].decode("utf-8", errors="replace"),
                ) from e

    async def create_confirmation(
        self, session: aiohttp.ClientSession, question: ConfirmationQuestion
    ) -> str:
        url = self._make_url("/confirmations/create")
        response = await self.request_json(
            session, "POST", url, json={"question": question.to_payload()}
        )
        if isinstance(response, dict):
            confirmation_id = response.get("confirmation_request_id")
            if isinstance(confirmation_id, str) and confirmation_id:
                return confirmation_id
        raise WaitHumanProtocolError("response missing confirmation_request_id")

    async def get_confirmation(
        self,
        session: aiohttp.ClientSession,
        confirmation_id: str,
        *,
        long_poll: bool = False,
    ) -> ConfirmationAnswer | None:
        """Return the answer if the human has replied, else None."""
        url = self._make_url(f"/confirmations/get/{quote(confirmation_id, safe='')}")
        params = {"long_poll": "true" if long_poll else "false"}
        response = await self.request_json(session, "GET", url, params=params)
        if not isinstance(response, dict):
            raise WaitHumanProtocolError(
                "poll response is not an object", payload_preview=repr(response)[:200]
            )
        maybe_answer = response.get("maybe_answer")
        if maybe_answer is None:
            return None
        return parse_confirmation_answer(maybe_answer)


def build_http_timeout(*, total_s: float | None = None) -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=total_s)
