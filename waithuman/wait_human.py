"""WaitHuman facade: generic `ask` plus the typed convenience helpers."""

from __future__ import annotations

import logging
from typing import Sequence

import aiohttp

from waithuman.client import ConfirmationsClient, build_http_timeout
from waithuman.config import WaitHumanConfig
from waithuman.engine import ask_for_answer
from waithuman.errors import (
    AskFailedError,
    InvalidSelectedIndexError,
    UnexpectedAnswerTypeError,
)
from waithuman.models import (
    AskOptions,
    ConfirmationAnswer,
    ConfirmationQuestion,
    FreeTextAnswer,
    FreeTextFormat,
    OptionsAnswer,
    OptionsFormat,
    QuestionMethod,
    Result,
)

log = logging.getLogger("waithuman")


class WaitHuman:
    """Ask a human a question and wait for the answer.

    `ask` never raises for network, remote or timeout failures; it returns a
    `Result`. `ask_free_text` and `ask_multiple_choice` raise a
    `WaitHumanException` subclass instead.

    Instances hold only immutable configuration and can be shared between
    concurrent tasks.
    """

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        config: WaitHumanConfig | None = None,
    ):
        config = config or WaitHumanConfig()
        self._api_key = config.resolve_api_key() if api_key is None else api_key
        if not self._api_key:
            raise ValueError("apiKey is mandatory")

        if endpoint is None:
            endpoint = config.resolve_endpoint()
        elif endpoint.endswith("/"):
            endpoint = endpoint[:-1]
        self.endpoint = endpoint

        self._poll_interval_s = config.resolve_poll_interval_s()
        self._http_timeout_s = config.resolve_http_timeout_s()
        self._long_poll = config.resolve_long_poll()
        self._client = ConfirmationsClient(self.endpoint, self._api_key)

    async def ask(
        self,
        question: ConfirmationQuestion,
        options: AskOptions | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> Result[ConfirmationAnswer]:
        """Send a fully-formed question and wait for the answer.

        A caller-supplied `session` is used as-is and left open; otherwise a
        session is opened and closed for this call.
        """
        timeout_seconds = options.timeout_seconds if options else None
        log.info(f"Asking: {question.subject[:50]}")

        if session is not None:
            return await self._ask_with(session, question, timeout_seconds)

        async with aiohttp.ClientSession(
            timeout=build_http_timeout(total_s=self._http_timeout_s)
        ) as own_session:
            return await self._ask_with(own_session, question, timeout_seconds)

    async def _ask_with(
        self,
        session: aiohttp.ClientSession,
        question: ConfirmationQuestion,
        timeout_seconds: float | None,
    ) -> Result[ConfirmationAnswer]:
        return await ask_for_answer(
            self._client,
            session,
            question,
            timeout_seconds=timeout_seconds,
            poll_interval_s=self._poll_interval_s,
            long_poll=self._long_poll,
        )

    async def ask_free_text(
        self,
        subject: str,
        body: str | None = None,
        options: AskOptions | None = None,
    ) -> str:
        """Ask a free-text question and return the human's text."""
        question = ConfirmationQuestion(
            method=QuestionMethod.push(),
            subject=subject,
            body=body,
            answer_format=FreeTextFormat(),
        )

        result = await self.ask(question, options)
        if result.error is not None:
            raise AskFailedError(result.error)

        content = result.data.answer_content
        if not isinstance(content, FreeTextAnswer):
            raise UnexpectedAnswerTypeError(content.type, "free_text")

        return content.text

    async def ask_multiple_choice(
        self,
        subject: str,
        choices: Sequence[str],
        body: str | None = None,
        options: AskOptions | None = None,
    ) -> str:
        """Ask a single-choice question and return the selected label.

        Only the first selected index is honoured.
        """
        choices = list(choices)
        question = ConfirmationQuestion(
            method=QuestionMethod.push(),
            subject=subject,
            body=body,
            answer_format=OptionsFormat(options=tuple(choices), multiple=False),
        )

        result = await self.ask(question, options)
        if result.error is not None:
            raise AskFailedError(result.error)

        content = result.data.answer_content
        if not isinstance(content, OptionsAnswer):
            raise UnexpectedAnswerTypeError(content.type, "options")

        selected_index = content.selected_indexes[0] if content.selected_indexes else None
        if selected_index is None or selected_index < 0 or selected_index >= len(choices):
            raise InvalidSelectedIndexError(selected_index)

        try:
            return choices[selected_index]
        except IndexError:
            raise InvalidSelectedIndexError(selected_index) from None
