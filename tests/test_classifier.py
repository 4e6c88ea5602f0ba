import pytest
from pydantic import BaseModel

from jsonhttp.http.classifier import (
    DEFAULT_ACCEPTED_STATUSES,
    classify,
    decode_error_reason,
    decode_model,
    status_error,
)
from jsonhttp.http.errors import (
    BadStatus,
    DecodingFailed,
    Forbidden,
    NotFound,
    ServerError,
    StatusError,
    Unauthorized,
)
from jsonhttp.http.transport import RawResponse


class Item(BaseModel):
    id: int
    name: str


@pytest.mark.parametrize("status", sorted(DEFAULT_ACCEPTED_STATUSES))
def test_default_accepted_statuses_return_body(status: int) -> None:
    assert classify(RawResponse(status=status, body=b"payload")) == b"payload"


def test_custom_accepted_set() -> None:
    assert classify(RawResponse(status=304, body=b""), {304}) == b""
    with pytest.raises(BadStatus):
        classify(RawResponse(status=200, body=b""), {201})


@pytest.mark.parametrize("body", [b"", b"not json", b'{"reason": "ignored"}', b"[1, 2"])
def test_401_is_unauthorized_regardless_of_body(body: bytes) -> None:
    with pytest.raises(Unauthorized) as excinfo:
        classify(RawResponse(status=401, body=body))

    assert excinfo.value.status_code == 401
    assert excinfo.value.reason is None
    assert excinfo.value.message


def test_403_is_forbidden() -> None:
    with pytest.raises(Forbidden):
        classify(RawResponse(status=403, body=b'{"reason": "waf"}'))


def test_404_is_not_found_and_ignores_reason() -> None:
    with pytest.raises(NotFound) as excinfo:
        classify(RawResponse(status=404, body=b'{"reason": "missing"}'))

    assert not isinstance(excinfo.value, BadStatus)
    assert excinfo.value.reason is None


@pytest.mark.parametrize("status", [500, 502, 503, 599])
def test_5xx_is_server_error(status: int) -> None:
    with pytest.raises(ServerError) as excinfo:
        classify(RawResponse(status=status, body=b'{"reason": "down"}'))

    assert excinfo.value.status_code == status


def test_other_status_is_bad_status_with_reason() -> None:
    with pytest.raises(BadStatus) as excinfo:
        classify(RawResponse(status=418, body=b'{"reason": "teapot"}'))

    assert excinfo.value.status_code == 418
    assert excinfo.value.reason == "teapot"
    assert "reason=teapot" in str(excinfo.value)


@pytest.mark.parametrize("body", [b"", b"<html>oops</html>", b'{"detail": "x"}', b'{"reason": 5}', b"[]"])
def test_bad_status_without_decodable_reason(body: bytes) -> None:
    with pytest.raises(BadStatus) as excinfo:
        classify(RawResponse(status=418, body=body))

    assert excinfo.value.status_code == 418
    assert excinfo.value.reason is None


@pytest.mark.parametrize("status", [301, 400, 409, 422, 429, 600])
def test_unnamed_statuses_are_bad_status(status: int) -> None:
    assert type(status_error(status)) is BadStatus


def test_named_statuses_outrank_accepted_miss() -> None:
    for status, expected in [(401, Unauthorized), (403, Forbidden), (404, NotFound), (500, ServerError)]:
        error = status_error(status, b'{"reason": "x"}')
        assert type(error) is expected
        assert isinstance(error, StatusError)


def test_accepted_set_wins_over_named_status() -> None:
    assert classify(RawResponse(status=404, body=b"gone"), {200, 404}) == b"gone"


def test_decode_error_reason_is_best_effort() -> None:
    assert decode_error_reason(b'{"reason": "nope", "code": 12}') == "nope"
    assert decode_error_reason(b"\xff\xfe") is None
    assert decode_error_reason(b"") is None


def test_decode_model_round_trip() -> None:
    item = decode_model(b'{"id": 1, "name": "widget"}', Item)

    assert item == Item(id=1, name="widget")


def test_decode_model_generic_types() -> None:
    assert decode_model(b"[1, 2, 3]", list[int]) == [1, 2, 3]
    assert decode_model(b'{"a": {"b": null}}', dict) == {"a": {"b": None}}


@pytest.mark.parametrize("body", [b"", b"not json", b'{"id": "x", "name": "widget"}', b'{"id": 1}'])
def test_decode_model_failure_is_decoding_failed(body: bytes) -> None:
    with pytest.raises(DecodingFailed) as excinfo:
        decode_model(body, Item, status_code=200)

    assert excinfo.value.status_code == 200
    assert excinfo.value.cause is excinfo.value.__cause__
    assert excinfo.value.cause is not None
