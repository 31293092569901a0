"""Shared fixtures: a stub confirmations client and an in-process fake service."""

import asyncio
import sys
from pathlib import Path

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from waithuman.models import ConfirmationAnswer, FreeTextAnswer


def free_text_answer(text="ship it"):
    return ConfirmationAnswer(answer_content=FreeTextAnswer(text=text))


class StubClient:
    """Stands in for ConfirmationsClient in engine tests.

    `answers` is consumed one item per poll: None (not answered yet), a
    ConfirmationAnswer, or an exception to raise. Once exhausted, polls
    return None.
    """

    def __init__(self, answers=(), create_exc=None, poll_delay=0.0):
        self.answers = list(answers)
        self.create_exc = create_exc
        self.poll_delay = poll_delay
        self.created = []
        self.polled = []

    async def create_confirmation(self, session, question):
        if self.create_exc is not None:
            raise self.create_exc
        self.created.append(question)
        return f"conf-{len(self.created)}"

    async def get_confirmation(self, session, confirmation_id, *, long_poll=False):
        self.polled.append((confirmation_id, long_poll))
        if self.poll_delay:
            await asyncio.sleep(self.poll_delay)
        item = self.answers.pop(0) if self.answers else None
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def stub_client():
    return StubClient


class FakeService:
    """Minimal WaitHuman API: create + get, with scriptable behaviour."""

    def __init__(self):
        self.endpoint = ""
        self.created = []
        self.polls = []
        self.auth_headers = []
        self.create_status = 200
        self.create_body = None
        self.poll_status = 200
        # Raw bytes sent verbatim instead of a JSON body, when set.
        self.create_raw_body = None
        self.poll_raw_body = None
        # Polls that report "not answered" before `answer` is returned.
        self.pending_polls = 0
        self.answer = None

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/confirmations/create", self._create)
        app.router.add_get("/confirmations/get/{confirmation_id}", self._get)
        return app

    def _raw(self, body: bytes, status: int = 200) -> web.Response:
        return web.Response(body=body, status=status, content_type="application/json")

    async def _create(self, request: web.Request) -> web.StreamResponse:
        self.auth_headers.append(request.headers.get("Authorization"))
        payload = await request.json()
        if self.create_status != 200:
            return web.json_response({"error": "nope"}, status=self.create_status)
        self.created.append(payload)
        if self.create_raw_body is not None:
            return self._raw(self.create_raw_body)
        if self.create_body is not None:
            return web.json_response(self.create_body)
        return web.json_response({"confirmation_request_id": f"conf-{len(self.created)}"})

    async def _get(self, request: web.Request) -> web.StreamResponse:
        self.auth_headers.append(request.headers.get("Authorization"))
        self.polls.append(
            (request.match_info["confirmation_id"], request.query.get("long_poll"))
        )
        if self.poll_raw_body is not None:
            return self._raw(self.poll_raw_body, status=self.poll_status)
        if self.poll_status != 200:
            return web.json_response({"error": "nope"}, status=self.poll_status)
        if self.pending_polls > 0:
            self.pending_polls -= 1
            return web.json_response({"maybe_answer": None})
        return web.json_response({"maybe_answer": self.answer})


@pytest_asyncio.fixture
async def fake_service():
    service = FakeService()
    server = TestServer(service.make_app())
    await server.start_server()
    service.endpoint = f"http://{server.host}:{server.port}"
    try:
        yield service
    finally:
        await server.close()
