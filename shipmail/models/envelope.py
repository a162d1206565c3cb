"""
Raw mailbox envelope schema.

Validates the message object handed over by the mailbox collaborator::

    {"id": ..., "threadId": ...,
     "payload": {"headers": [{"name": ..., "value": ...}],
                 "body": {"data": "<base64url>"},
                 "parts": [{"mimeType": "text/html", "body": {"data": ...}}]}}
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EnvelopeHeader(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    value: Optional[str] = ""


class EnvelopeBody(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    data: Optional[str] = Field(default=None, description="base64url-encoded content")


class EnvelopePart(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    mime_type: str = Field(default="", alias="mimeType")
    body: EnvelopeBody = Field(default_factory=EnvelopeBody)
    parts: Optional[List["EnvelopePart"]] = None


class EnvelopePayload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    mime_type: str = Field(default="", alias="mimeType")
    headers: List[EnvelopeHeader] = Field(default_factory=list)
    body: EnvelopeBody = Field(default_factory=EnvelopeBody)
    parts: Optional[List[EnvelopePart]] = None


class RawEnvelope(BaseModel):
    """A mailbox message in its transport shape. ``payload`` is mandatory."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    thread_id: Optional[str] = Field(default=None, alias="threadId")
    payload: EnvelopePayload


EnvelopePart.model_rebuild()
