"""Question/answer data model shared by the engine and the facade.

Wire shapes (JSON):

    question:  {"method": {"type": "push"}, "subject": "...", "body": null,
                "answer_format": {"type": "free_text"}}
    answer:    {"answer": {"answer_content": {"type": "options",
                                              "selected_indexes": [1]}},
                "answered_at": "..."}

Unknown `type` tags on answer content are kept as `UnknownAnswerContent`
instead of failing, so the service can grow new variants.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar, Union

from waithuman.errors import WaitHumanProtocolError

T = TypeVar("T")

ErrorReason = Literal[
    "timeout",
    "network_error",
    "invalid_response",
    "create_failed",
    "poll_failed",
    "unexpected_answer_type",
]

ERROR_REASONS: frozenset[str] = frozenset(
    {
        "timeout",
        "network_error",
        "invalid_response",
        "create_failed",
        "poll_failed",
        "unexpected_answer_type",
    }
)


@dataclass(frozen=True)
class QuestionMethod:
    """Delivery channel for a question. Passed through untouched."""

    type: str = "push"

    @classmethod
    def push(cls) -> QuestionMethod:
        return cls(type="push")

    def to_payload(self) -> dict[str, object]:
        return {"type": self.type}


@dataclass(frozen=True)
class FreeTextFormat:
    type: Literal["free_text"] = field(default="free_text", init=False)

    def to_payload(self) -> dict[str, object]:
        return {"type": self.type}


@dataclass(frozen=True)
class OptionsFormat:
    options: tuple[str, ...]
    multiple: bool = False
    type: Literal["options"] = field(default="options", init=False)

    def __post_init__(self) -> None:
        # Accept any sequence of labels but store an immutable copy.
        object.__setattr__(self, "options", tuple(self.options))

    def to_payload(self) -> dict[str, object]:
        return {
            "type": self.type,
            "options": list(self.options),
            "multiple": self.multiple,
        }


AnswerFormat = Union[FreeTextFormat, OptionsFormat]


@dataclass(frozen=True, kw_only=True)
class ConfirmationQuestion:
    """The request payload. Not the request handle.

    Keyword-only; `method` defaults to push and `body` to None.
    """

    method: QuestionMethod = field(default_factory=QuestionMethod.push)
    subject: str
    body: str | None = None
    answer_format: AnswerFormat

    def to_payload(self) -> dict[str, object]:
        return {
            "method": self.method.to_payload(),
            "subject": self.subject,
            "body": self.body,
            "answer_format": self.answer_format.to_payload(),
        }


@dataclass(frozen=True)
class FreeTextAnswer:
    text: str
    type: Literal["free_text"] = field(default="free_text", init=False)


@dataclass(frozen=True)
class OptionsAnswer:
    # Indexes into the original options; the service does not validate them.
    selected_indexes: tuple[int, ...]
    type: Literal["options"] = field(default="options", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected_indexes", tuple(self.selected_indexes))


@dataclass(frozen=True)
class UnknownAnswerContent:
    type: str
    raw: dict[str, Any] = field(default_factory=dict)


AnswerContent = Union[FreeTextAnswer, OptionsAnswer, UnknownAnswerContent]


@dataclass(frozen=True)
class ConfirmationAnswer:
    """The full answer envelope returned by the service."""

    answer_content: AnswerContent
    answered_at: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class WaitHumanError:
    reason: ErrorReason
    description: str | None = None

    def __post_init__(self) -> None:
        if self.reason not in ERROR_REASONS:
            raise ValueError(f"Unknown error reason: {self.reason!r}")

    def __str__(self) -> str:
        return f"{self.reason} {self.description or ''}".rstrip()


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either `data` or `error`, never both and never neither."""

    data: T | None = None
    error: WaitHumanError | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("Result must carry exactly one of data or error")

    @classmethod
    def success(cls, data: T) -> Result[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, reason: ErrorReason, description: str | None = None) -> Result[T]:
        return cls(error=WaitHumanError(reason=reason, description=description))

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AskOptions:
    # None waits forever.
    timeout_seconds: float | None = None


def _preview(payload: object, limit: int = 200) -> str:
    try:
        text = json.dumps(payload)
    except (TypeError, ValueError):
        text = repr(payload)
    return text if len(text) <= limit else text[:limit] + "..."


def parse_answer_content(payload: object) -> AnswerContent:
    if not isinstance(payload, dict):
        raise WaitHumanProtocolError(
            "answer_content is not an object", payload_preview=_preview(payload)
        )

    content_type = payload.get("type")
    if not isinstance(content_type, str) or not content_type:
        raise WaitHumanProtocolError(
            "answer_content has no type tag", payload_preview=_preview(payload)
        )

    if content_type == "free_text":
        text = payload.get("text")
        if not isinstance(text, str):
            raise WaitHumanProtocolError(
                "free_text answer without text", payload_preview=_preview(payload)
            )
        return FreeTextAnswer(text=text)

    if content_type == "options":
        indexes = payload.get("selected_indexes")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(indexes, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in indexes
        ):
            raise WaitHumanProtocolError(
                "options answer with invalid selected_indexes",
                payload_preview=_preview(payload),
            )
        return OptionsAnswer(selected_indexes=tuple(indexes))

    return UnknownAnswerContent(type=content_type, raw=dict(payload))


def parse_confirmation_answer(payload: object) -> ConfirmationAnswer:
    """Parse a `maybe_answer` payload.

    Accepts the nested `{"answer": {"answer_content": ...}}` envelope and the
    flat `{"answer_content": ...}` form.
    """
    if not isinstance(payload, dict):
        raise WaitHumanProtocolError(
            "answer is not an object", payload_preview=_preview(payload)
        )

    inner = payload.get("answer")
    if isinstance(inner, dict) and "answer_content" in inner:
        content_payload = inner["answer_content"]
    elif "answer_content" in payload:
        content_payload = payload["answer_content"]
    else:
        raise WaitHumanProtocolError(
            "answer has no answer_content", payload_preview=_preview(payload)
        )

    answered_at = payload.get("answered_at")
    if not isinstance(answered_at, str):
        answered_at = None

    return ConfirmationAnswer(
        answer_content=parse_answer_content(content_payload),
        answered_at=answered_at,
        raw=dict(payload),
    )
