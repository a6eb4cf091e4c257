"""Reusable annotated field types for request payloads."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator


def _reject_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Whitespace-only text counts as missing; the value itself is stored unstripped.
NonBlankStr = Annotated[str, AfterValidator(_reject_blank)]

__all__ = ["NonBlankStr"]
