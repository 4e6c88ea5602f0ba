import json
from dataclasses import FrozenInstanceError, dataclass

import pytest
from pydantic import BaseModel

from jsonhttp.http.errors import EncodingFailed
from jsonhttp.http.request import DEFAULT_ACCEPT_ENCODING, HttpMethod, build_request


class Note(BaseModel):
    title: str
    tags: list[str]


@dataclass
class Point:
    x: int
    y: int


def test_get_without_body_has_no_content_type() -> None:
    spec = build_request("https://api.example.com/items")

    assert spec.method is HttpMethod.GET
    assert spec.body is None
    assert spec.header("Accept-Encoding") == DEFAULT_ACCEPT_ENCODING
    assert spec.header("Content-Type") is None


@pytest.mark.parametrize(
    "body",
    [{"name": "x"}, [1, 2, 3], "text", 0, False, Note(title="t", tags=["a"]), Point(x=1, y=2)],
)
def test_body_sets_json_content_type(body: object) -> None:
    spec = build_request("https://api.example.com/items", method="POST", body=body)

    assert spec.header("Content-Type") == "application/json"
    assert spec.header("Accept-Encoding") == DEFAULT_ACCEPT_ENCODING
    assert spec.body is not None


def test_body_is_compact_json() -> None:
    spec = build_request("https://api.example.com/items", method=HttpMethod.PUT, body={"name": "x", "n": 1})

    assert json.loads(spec.body) == {"name": "x", "n": 1}


def test_model_body_serialized_by_field() -> None:
    spec = build_request("https://api.example.com/notes", method="post", body=Note(title="t", tags=["a", "b"]))

    assert spec.method is HttpMethod.POST
    assert json.loads(spec.body) == {"title": "t", "tags": ["a", "b"]}


def test_caller_headers_override_defaults() -> None:
    spec = build_request(
        "https://api.example.com/items",
        headers={"accept-encoding": "identity", "Content-Type": "application/vnd.api+json", "X-Token": "abc"},
        method="POST",
        body={"a": 1},
    )

    assert spec.header("Accept-Encoding") == "identity"
    assert spec.header("Content-Type") == "application/vnd.api+json"
    assert spec.header("x-token") == "abc"
    assert len(spec.headers) == 3


def test_default_headers_sit_between_builtin_and_caller_headers() -> None:
    spec = build_request(
        "https://api.example.com/items",
        headers={"Authorization": "Bearer caller"},
        default_headers={"Authorization": "Bearer default", "User-Agent": "jsonhttp"},
    )

    assert spec.header("Authorization") == "Bearer caller"
    assert spec.header("User-Agent") == "jsonhttp"


def test_custom_accept_encoding() -> None:
    spec = build_request("https://api.example.com/items", accept_encoding="gzip")

    assert spec.header("Accept-Encoding") == "gzip"


def test_unserializable_body_raises_encoding_failed() -> None:
    with pytest.raises(EncodingFailed) as excinfo:
        build_request("https://api.example.com/items", method="POST", body={"when": object()})

    assert excinfo.value.cause is not None
    assert excinfo.value.__cause__ is excinfo.value.cause
    assert str(excinfo.value)


def test_update_method_is_supported() -> None:
    spec = build_request("https://api.example.com/items/1", method="UPDATE", body={"a": 1})

    assert spec.method is HttpMethod.UPDATE
    assert spec.method.value == "UPDATE"


def test_unknown_method_rejected() -> None:
    with pytest.raises(ValueError):
        build_request("https://api.example.com/items", method="PATCH")


def test_request_spec_is_immutable() -> None:
    spec = build_request("https://api.example.com/items", headers={"X-Token": "abc"})

    with pytest.raises(FrozenInstanceError):
        spec.url = "https://other.example.com"  # type: ignore[misc]
    with pytest.raises(TypeError):
        spec.headers["X-Token"] = "changed"  # type: ignore[index]


def test_caller_mapping_is_copied() -> None:
    headers = {"X-Token": "abc"}
    spec = build_request("https://api.example.com/items", headers=headers)
    headers["X-Token"] = "changed"

    assert spec.header("X-Token") == "abc"
