"""Invitation schemas."""

from typing import Any

from pydantic import BaseModel


class SaveAnswersRequest(BaseModel):
    answers: Any = None


class SaveAnswersResponse(BaseModel):
    success: bool = True
    message: str = "Answers saved successfully"
    answers: dict
