"""Request-poll engine.

Creates a confirmation, then polls for its answer under an optional deadline:

    Creating -> Polling -> Answered | TimedOut | Failed

Every expected failure comes back as a `Result` carrying a `WaitHumanError`;
nothing is retried. Anything that isn't a transport, HTTP or protocol
failure propagates.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol

import aiohttp

from waithuman.config import DEFAULT_POLL_INTERVAL_S
from waithuman.errors import WaitHumanHTTPError, WaitHumanProtocolError
from waithuman.models import ConfirmationAnswer, ConfirmationQuestion, Result

log = logging.getLogger("waithuman")

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class ConfirmationSource(Protocol):
    async def create_confirmation(
        self, session: aiohttp.ClientSession, question: ConfirmationQuestion
    ) -> str:
        ...

    async def get_confirmation(
        self,
        session: aiohttp.ClientSession,
        confirmation_id: str,
        *,
        long_poll: bool = False,
    ) -> ConfirmationAnswer | None:
        ...


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


async def create_confirmation(
    client: ConfirmationSource,
    session: aiohttp.ClientSession,
    question: ConfirmationQuestion,
) -> Result[str]:
    try:
        confirmation_id = await client.create_confirmation(session, question)
    except WaitHumanHTTPError as e:
        log.warning(f"Confirmation create failed: {e}")
        return Result.failure("create_failed", e.status_text)
    except WaitHumanProtocolError as e:
        log.warning(f"Confirmation create failed: {e}")
        return Result.failure("create_failed", e.message)
    except TRANSPORT_ERRORS as e:
        log.warning(f"Confirmation create network error: {type(e).__name__}: {e}")
        return Result.failure("network_error", _describe(e))

    log.info(f"Created confirmation {confirmation_id}")
    return Result.success(confirmation_id)


async def poll_for_answer(
    client: ConfirmationSource,
    session: aiohttp.ClientSession,
    confirmation_id: str,
    *,
    timeout_seconds: float | None = None,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    long_poll: bool = False,
) -> Result[ConfirmationAnswer]:
    """Poll until answered, failed, or past `timeout_seconds` (None = forever).

    With a deadline, the in-flight poll request is cut off when the deadline
    passes, so a slow request cannot stretch the wait past it.
    """
    started = time.monotonic()

    def _timed_out(elapsed: float) -> Result[ConfirmationAnswer]:
        log.info(f"Confirmation {confirmation_id} timed out after {elapsed:.1f}s")
        return Result.failure("timeout", f"elapsed seconds: {elapsed}")

    while True:
        elapsed = time.monotonic() - started
        if timeout_seconds is not None and elapsed > timeout_seconds:
            return _timed_out(elapsed)

        request = client.get_confirmation(session, confirmation_id, long_poll=long_poll)
        try:
            if timeout_seconds is None:
                answer = await request
            else:
                answer = await asyncio.wait_for(request, timeout=timeout_seconds - elapsed)
        except WaitHumanHTTPError as e:
            log.warning(f"Confirmation {confirmation_id} poll failed: {e}")
            return Result.failure("poll_failed", e.status_text)
        except WaitHumanProtocolError as e:
            log.warning(f"Confirmation {confirmation_id} poll returned bad data: {e}")
            return Result.failure("invalid_response", e.message)
        except TRANSPORT_ERRORS as e:
            elapsed = time.monotonic() - started
            if timeout_seconds is not None and elapsed >= timeout_seconds:
                return _timed_out(elapsed)
            log.warning(
                f"Confirmation {confirmation_id} poll network error: {type(e).__name__}: {e}"
            )
            return Result.failure("network_error", _describe(e))

        if answer is not None:
            log.info(f"Confirmation {confirmation_id} answered")
            return Result.success(answer)

        log.debug(f"Confirmation {confirmation_id} not answered yet; sleeping {poll_interval_s}s")
        await asyncio.sleep(poll_interval_s)


async def ask_for_answer(
    client: ConfirmationSource,
    session: aiohttp.ClientSession,
    question: ConfirmationQuestion,
    *,
    timeout_seconds: float | None = None,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    long_poll: bool = False,
) -> Result[ConfirmationAnswer]:
    created = await create_confirmation(client, session, question)
    if created.error is not None:
        return Result(error=created.error)

    return await poll_for_answer(
        client,
        session,
        created.data,
        timeout_seconds=timeout_seconds,
        poll_interval_s=poll_interval_s,
        long_poll=long_poll,
    )
