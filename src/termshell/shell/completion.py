"""Completion policies for command handler results.

A handler can finish in three ways: return a value, return something
awaitable, or return nothing and settle its context later. The result is
classified once into a tagged variant so the dispatcher handles each path
explicitly.
"""

from __future__ import annotations

import inspect
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ImmediateCompletion(BaseModel):
    """The handler returned a plain value; the dispatch is already done."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["immediate"] = "immediate"
    value: Any = None


class PendingCompletion(BaseModel):
    """The handler returned an awaitable whose outcome becomes the dispatch's."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pending"] = "pending"
    awaitable: Any


class SignalledCompletion(BaseModel):
    """The handler returned nothing and will settle through its context."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["signalled"] = "signalled"


CompletionPolicy = Annotated[
    Union[ImmediateCompletion, PendingCompletion, SignalledCompletion],
    Field(discriminator="kind"),
]


def completion_policy(result: Any) -> CompletionPolicy:
    """Classify a handler's return value."""
    if inspect.isawaitable(result):
        return PendingCompletion(awaitable=result)
    if result is None:
        return SignalledCompletion()
    return ImmediateCompletion(value=result)
