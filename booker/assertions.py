"""Chainable checks over an httpx response.

    expect(resp).status(200).field("booking.firstname", "Alice").extract("bookingid")

Failures raise subclasses of ``AssertionError`` and log the request and
response bodies; passing checks log nothing.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from booker.exceptions.custom import FieldMismatch, MissingField, UnexpectedStatus
from booker.mappers.json_path import PathNotFound, flatten, resolve

logger = logging.getLogger(__name__)

_PREVIEW = 200
_NO_BODY = object()


def same_value(expected: Any, actual: Any) -> bool:
    """Deep equality that keeps ``True`` apart from ``1``."""
    if isinstance(expected, bool) or isinstance(actual, bool):
        return type(expected) is type(actual) and expected == actual
    if isinstance(expected, Mapping) and isinstance(actual, Mapping):
        return expected.keys() == actual.keys() and all(
            same_value(expected[k], actual[k]) for k in expected
        )
    if isinstance(expected, (list, tuple)) and isinstance(actual, (list, tuple)):
        return len(expected) == len(actual) and all(
            same_value(e, a) for e, a in zip(expected, actual)
        )
    return expected == actual


def _preview(text: str) -> str:
    return text if len(text) <= _PREVIEW else text[:_PREVIEW] + "..."


class ResponseAssertion:
    def __init__(self, response: httpx.Response):
        self._response = response
        self._body: Any = _NO_BODY

    @property
    def method(self) -> str:
        return self._response.request.method

    @property
    def path(self) -> str:
        return self._response.request.url.raw_path.decode()

    def _json(self) -> Any:
        if self._body is _NO_BODY:
            try:
                self._body = self._response.json()
            except (json.JSONDecodeError, UnicodeDecodeError):
                self._body = None
        return self._body

    def fail(self, error: AssertionError) -> None:
        """Log the exchange and raise ``error``."""
        request = self._response.request
        logger.error(
            "%s %s -> %d\nrequest: %s\nresponse: %s",
            self.method,
            self.path,
            self._response.status_code,
            request.content.decode(errors="replace") or "<empty>",
            self._response.text or "<empty>",
        )
        raise error

    def _lookup(self, path: str) -> Any:
        body = self._json()
        if body is None:
            self.fail(MissingField(path))
        try:
            return resolve(body, path)
        except PathNotFound:
            self.fail(MissingField(path))

    def status(self, expected: int) -> "ResponseAssertion":
        actual = self._response.status_code
        if actual != expected:
            self.fail(
                UnexpectedStatus(
                    self.method, self.path, expected, actual, _preview(self._response.text)
                )
            )
        return self

    def field(self, path: str, expected: Any) -> "ResponseAssertion":
        actual = self._lookup(path)
        if not same_value(expected, actual):
            self.fail(FieldMismatch(path, expected, actual))
        return self

    def fields(self, expected: Mapping[str, Any], prefix: str = "") -> "ResponseAssertion":
        """Assert every leaf of ``expected`` under ``prefix``."""
        for path, value in flatten(expected, prefix).items():
            self.field(path, value)
        return self

    def not_null(self, path: str) -> "ResponseAssertion":
        if self._lookup(path) is None:
            self.fail(MissingField(path))
        return self

    def parse(self, type_: Any) -> Any:
        """Validate the whole body as ``type_`` (a model or e.g. ``list[Model]``)."""
        body = self._json()
        if body is None:
            self.fail(MissingField("<body>"))
        try:
            return TypeAdapter(type_).validate_python(body)
        except ValidationError as exc:
            error = exc.errors()[0]
            path = ".".join(str(part) for part in error["loc"]) or "<body>"
            if error["type"] == "missing":
                self.fail(MissingField(path))
            self.fail(FieldMismatch(path, error["msg"], error.get("input")))

    def extract(self, path: str) -> Any:
        value = self._lookup(path)
        if value is None:
            self.fail(MissingField(path))
        return value


def expect(response: httpx.Response) -> ResponseAssertion:
    return ResponseAssertion(response)
