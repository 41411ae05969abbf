from __future__ import annotations

import pytest

from restrpc.config import resolve
from restrpc.descriptors import RequestDescriptor, ResponseDescriptor, classify_content_type
from restrpc.errors import AuthError, RemoteError, RPCError
from restrpc.results import Absent, Failure, Success, normalize_rest, normalize_rpc


def json_response(status: int, body) -> ResponseDescriptor:
    return ResponseDescriptor(status_code=status, content_type="json", body=body)


@pytest.mark.parametrize(
    "header, expected",
    [
        ("application/json", "json"),
        ("application/json; charset=utf-8", "json"),
        ("application/problem+json", "json"),
        ("text/html; charset=utf-8", "text/html"),
        (None, ""),
    ],
)
def test_classify_content_type(header, expected) -> None:
    assert classify_content_type(header) == expected


def test_rest_priority_order() -> None:
    # 404 wins even when the body is not JSON.
    assert isinstance(normalize_rest(ResponseDescriptor(404, "text/html")), Absent)
    # 401 wins over content type.
    failure = normalize_rest(ResponseDescriptor(401, "text/html"))
    assert isinstance(failure, Failure) and isinstance(failure.error, AuthError)


def test_rest_empty_object_is_a_body() -> None:
    assert normalize_rest(json_response(200, {})) == Success({})
    assert normalize_rest(json_response(200, [])) == Success([])


@pytest.mark.parametrize("body", [None, "", 0, False])
def test_rest_blank_bodies(body) -> None:
    result = normalize_rest(json_response(200, body))
    assert isinstance(result, Failure)
    assert str(result.error) == "Bad response (no body)."


def test_rest_string_error() -> None:
    result = normalize_rest(json_response(400, {"error": "denied"}))
    assert isinstance(result.error, RemoteError)
    assert result.error.message == "denied"
    assert result.error.type is None


def test_blank_error_is_ignored() -> None:
    assert normalize_rest(json_response(200, {"error": None, "value": 1})) == Success({"error": None, "value": 1})
    assert normalize_rest(json_response(200, {"error": False, "value": 1})) == Success({"error": False, "value": 1})
    assert normalize_rpc(json_response(200, {"error": 0, "result": 5})) == Success(5)


@pytest.mark.parametrize("error", [{}, []])
def test_empty_container_error_is_an_error(error) -> None:
    rest = normalize_rest(json_response(200, {"error": error}))
    assert isinstance(rest, Failure)
    assert isinstance(rest.error, RemoteError)
    rpc = normalize_rpc(json_response(200, {"error": error, "result": 5}))
    assert isinstance(rpc, Failure)
    assert isinstance(rpc.error, RPCError)


def test_missing_error_fields() -> None:
    rest = normalize_rest(json_response(400, {"error": {"code": 9}}))
    assert rest.error.message == ""
    assert rest.error.type is None
    assert rest.error.code == 9
    typed = normalize_rest(json_response(400, {"error": {"message": "m", "type": False}}))
    assert typed.error.type == "False"
    rpc = normalize_rpc(json_response(200, {"error": {"code": -32600}}))
    assert rpc.error.message == ""
    assert rpc.error.code == (-32600) & 0xFFFFFFFF


def test_rpc_result_of_non_object_body() -> None:
    assert normalize_rpc(json_response(200, [1, 2])) == Success(None)


def test_rpc_error_code_coercion() -> None:
    assert RPCError("x", -1).code == 4294967295
    assert RPCError("x", None).code == 0
    assert RPCError("x", "12").code == 12
    assert RPCError(None, 3).message == ""


def test_unwrap() -> None:
    assert Success(1).unwrap() == 1
    assert Absent().unwrap() is None
    with pytest.raises(AuthError):
        Failure(AuthError("no")).unwrap()


def test_descriptor_rejects_query_and_body() -> None:
    with pytest.raises(ValueError):
        RequestDescriptor("GET", False, "h", 80, "/", query={}, json={})


def test_descriptor_build_prefixes_base_path() -> None:
    descriptor = RequestDescriptor.build(resolve("http://u:p@h:81/base"), "GET", "/x", query={"a": 1})
    assert descriptor.path == "/base/x"
    assert descriptor.username == "u"
    assert descriptor.password == "p"
    assert descriptor.use_pool
    assert descriptor.json is None


def test_descriptor_path_is_literal_join() -> None:
    assert RequestDescriptor.build(resolve(), "POST", "/x", json={}).path == "//x"
    assert RequestDescriptor.build(resolve(), "POST", "x", json={}).path == "/x"
