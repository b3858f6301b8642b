"""Shared test doubles: a recording response writer and named steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class ResponseRecorder:
    """Stand-in for a transport response writer: collects written chunks."""

    def __init__(self) -> None:
        self.chunks: list[str] = []

    def write(self, data: str) -> None:
        self.chunks.append(data)

    @property
    def body(self) -> str:
        return "".join(self.chunks).strip()


@dataclass
class Request:
    path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)


def _writer(word: str, result: bool):
    def step(w: ResponseRecorder, r: Request) -> bool:
        w.write(f"{word} ")
        return result

    step.__name__ = step.__qualname__ = word
    return step


one = _writer("one", True)
two = _writer("two", True)
three = _writer("three", True)
four = _writer("four", True)
five = _writer("five", True)
stop = _writer("stop", False)


def final(w: ResponseRecorder, r: Request) -> str:
    w.write("final ")
    return "done"


def wrapper1(w: ResponseRecorder, r: Request, proceed: Any) -> None:
    w.write("wrapper1_start ")
    proceed()
    w.write("wrapper1_end ")


def wrapper2(w: ResponseRecorder, r: Request, proceed: Any) -> None:
    w.write("wrapper2_start ")
    proceed()
    w.write("wrapper2_end ")


def serve(handler: Any, request: Request | None = None) -> str:
    """Invoke *handler* the way a transport would and return the response body."""
    w = ResponseRecorder()
    handler(w, request or Request())
    return w.body
