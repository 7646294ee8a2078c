"""API request / response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ThreadCreateRequest(BaseModel):
    message: str = Field(min_length=1)
    model: str | None = None


class ContinueRequest(BaseModel):
    message: str = Field(min_length=1)


class ModelChangeRequest(BaseModel):
    model: str = Field(min_length=1)


class ExecuteRequest(BaseModel):
    command: str = Field(min_length=1)
    model: str | None = None


class StepResponse(BaseModel):
    """One turn: the chosen intent, its result and the thread state after it."""

    thread_id: str
    model: str | None = None
    next_step: dict[str, Any]
    result: dict[str, Any]
    state: dict[str, Any]


class ExecuteResponse(BaseModel):
    command: str
    model: str
    next_step: dict[str, Any]
    result: dict[str, Any]


class ThreadStateResponse(BaseModel):
    thread_id: str
    state: dict[str, Any]


class ModelChangeResponse(BaseModel):
    thread_id: str
    result: dict[str, Any]
    state: dict[str, Any]


class ThreadSummary(BaseModel):
    thread_id: str
    model: str
    context_length: int


class ThreadListResponse(BaseModel):
    threads: list[ThreadSummary] = Field(default_factory=list)


class ModelInfo(BaseModel):
    name: str
    size: int
    display: str
    details: dict[str, Any] = Field(default_factory=dict)


class ModelsResponse(BaseModel):
    models: list[ModelInfo] = Field(default_factory=list)
    recommendations: dict[str, list[str]] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    ollama: str
    timestamp: str
    version: str = ""
