"""Ask a human a question over the WaitHuman API and wait for the answer."""

from waithuman.config import WaitHumanConfig
from waithuman.errors import (
    AskFailedError,
    InvalidSelectedIndexError,
    UnexpectedAnswerTypeError,
    WaitHumanException,
    WaitHumanHTTPError,
    WaitHumanProtocolError,
)
from waithuman.models import (
    AnswerContent,
    AnswerFormat,
    AskOptions,
    ConfirmationAnswer,
    ConfirmationQuestion,
    ErrorReason,
    FreeTextAnswer,
    FreeTextFormat,
    OptionsAnswer,
    OptionsFormat,
    QuestionMethod,
    Result,
    UnknownAnswerContent,
    WaitHumanError,
)
from waithuman.wait_human import WaitHuman

__version__ = "0.1.0"

__all__ = [
    "WaitHuman",
    "WaitHumanConfig",
    "AnswerContent",
    "AnswerFormat",
    "AskOptions",
    "ConfirmationAnswer",
    "ConfirmationQuestion",
    "ErrorReason",
    "FreeTextAnswer",
    "FreeTextFormat",
    "OptionsAnswer",
    "OptionsFormat",
    "QuestionMethod",
    "Result",
    "UnknownAnswerContent",
    "WaitHumanError",
    "AskFailedError",
    "InvalidSelectedIndexError",
    "UnexpectedAnswerTypeError",
    "WaitHumanException",
    "WaitHumanHTTPError",
    "WaitHumanProtocolError",
]
