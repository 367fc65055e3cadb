"""Unit tests for the IPFS API client."""

import io
import json

import httpx
import pytest

from mfsmirror.api import IpfsClient
from mfsmirror.exceptions import (
    MfsAPIError,
    MfsAuthenticationError,
    MfsInvalidRequestError,
    MfsInvalidResponseError,
    MfsNetworkError,
    MfsNotFoundError,
    MfsPermissionError,
)


def make_client(handler) -> IpfsClient:
    """Create a client whose requests are answered by handler."""
    client = IpfsClient(api_url="http://ipfs.test:5001", timeout=5)
    client._client = httpx.Client(transport=httpx.MockTransport(handler))
    return client


def json_response(data, status_code=200):
    return httpx.Response(
        status_code,
        content=json.dumps(data).encode(),
        headers={"Content-Type": "application/json"},
    )


class Recorder:
    """MockTransport handler that records requests."""

    def __init__(self, response=None):
        self.requests: list[httpx.Request] = []
        self.response = response or httpx.Response(200)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.response


class TestIpfsClient:
    """Tests for IpfsClient initialization."""

    def test_init_with_api_url(self):
        client = IpfsClient(api_url="http://node:5001/", timeout=10)
        assert client.api_url == "http://node:5001"
        assert client.timeout == 10

    def test_auth_header(self):
        client = IpfsClient(
            api_url="http://node:5001", api_auth="Basic dXNlcjpwYXNz", timeout=10
        )

        http_client = client._get_client()

        assert http_client.headers["Authorization"] == "Basic dXNlcjpwYXNz"
        client.close()

    def test_close(self):
        client = IpfsClient(api_url="http://node:5001", timeout=10)
        http_client = client._get_client()

        client.close()

        assert http_client.is_closed
        assert client._client is None


class TestMfsCommands:
    """Tests for the files/* commands."""

    def test_mkdir(self):
        recorder = Recorder()
        client = make_client(recorder)

        client.files_mkdir("/a/b", parents=True, flush=False)

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v0/files/mkdir"
        assert request.url.params["arg"] == "/a/b"
        assert request.url.params["parents"] == "true"
        assert request.url.params["flush"] == "false"

    def test_rm(self):
        recorder = Recorder()
        client = make_client(recorder)

        client.files_rm("/a", recursive=True, flush=False)

        params = recorder.requests[0].url.params
        assert recorder.requests[0].url.path == "/api/v0/files/rm"
        assert params["recursive"] == "true"
        assert params["flush"] == "false"

    def test_cp_sends_both_args(self):
        recorder = Recorder()
        client = make_client(recorder)

        client.files_cp("/ipfs/QmHash", "/dest/file.txt", flush=True)

        params = recorder.requests[0].url.params
        assert params.get_list("arg") == ["/ipfs/QmHash", "/dest/file.txt"]
        assert params["flush"] == "true"

    def test_ls(self):
        recorder = Recorder(
            json_response(
                {
                    "Entries": [
                        {"Name": "dir", "Type": 1, "Size": 0, "Hash": "QmDir"},
                        {"Name": "f.txt", "Type": 0, "Size": 12, "Hash": "QmFile"},
                    ]
                }
            )
        )
        client = make_client(recorder)

        entries = client.files_ls("/x")

        assert [e.name for e in entries] == ["dir", "f.txt"]
        assert entries[0].is_directory
        assert not entries[1].is_directory
        assert entries[1].size == 12
        assert entries[1].hash == "QmFile"
        params = recorder.requests[0].url.params
        assert params["U"] == "true"
        assert params["long"] == "true"

    def test_ls_empty_directory(self):
        client = make_client(Recorder(json_response({"Entries": None})))

        assert client.files_ls("/empty") == []

    def test_flush(self):
        client = make_client(Recorder(json_response({"Cid": "QmRoot"})))

        assert client.files_flush("/x") == "QmRoot"


class TestAdd:
    """Tests for the add command."""

    def test_add_returns_hash(self):
        recorder = Recorder(
            json_response({"Name": "a.txt", "Hash": "QmAdded", "Size": "13"})
        )
        client = make_client(recorder)

        cid = client.add(io.BytesIO(b"file content"), name="a.txt")

        assert cid == "QmAdded"
        request = recorder.requests[0]
        assert request.url.path == "/api/v0/add"
        assert request.url.params["pin"] == "false"
        assert b'filename="a.txt"' in request.content
        assert b"file content" in request.content

    def test_add_uses_last_line(self):
        body = (
            b'{"Name": "a.txt", "Bytes": 4}\n'
            b'{"Name": "a.txt", "Hash": "QmFinal", "Size": "12"}\n'
        )
        response = httpx.Response(
            200, content=body, headers={"Content-Type": "application/json"}
        )
        client = make_client(Recorder(response))

        assert client.add(io.BytesIO(b"data")) == "QmFinal"

    def test_add_without_hash(self):
        client = make_client(Recorder(json_response({"Name": "a.txt"})))

        with pytest.raises(MfsInvalidResponseError, match="No hash"):
            client.add(io.BytesIO(b"data"))

    def test_add_empty_response(self):
        client = make_client(Recorder(httpx.Response(200)))

        with pytest.raises(MfsInvalidResponseError):
            client.add(io.BytesIO(b"data"))


class TestErrors:
    """Tests for error translation."""

    def test_does_not_exist(self):
        response = json_response(
            {"Message": "file does not exist", "Code": 0, "Type": "error"}, 500
        )
        client = make_client(Recorder(response))

        with pytest.raises(MfsNotFoundError, match="file does not exist"):
            client.files_rm("/missing")

    def test_server_error_message(self):
        response = json_response(
            {"Message": "cp: cannot put node in path", "Code": 0, "Type": "error"},
            500,
        )
        client = make_client(Recorder(response))

        with pytest.raises(MfsAPIError, match="cannot put node") as exc_info:
            client.files_cp("/ipfs/QmX", "/a")

        assert not isinstance(exc_info.value, MfsNotFoundError)
        assert exc_info.value.status_code == 500

    def test_plain_text_error(self):
        client = make_client(Recorder(httpx.Response(404, text="404 page not found")))

        with pytest.raises(MfsAPIError, match="404 page not found"):
            client.files_flush("/")

    def test_http_401(self):
        client = make_client(Recorder(httpx.Response(401)))

        with pytest.raises(MfsAuthenticationError):
            client.files_ls("/")

    def test_http_403(self):
        client = make_client(Recorder(httpx.Response(403)))

        with pytest.raises(MfsPermissionError):
            client.files_ls("/")

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(MfsNetworkError, match="Connection refused"):
            client.files_mkdir("/a")

    def test_unexpected_content_type(self):
        response = httpx.Response(
            200, content=b"<html></html>", headers={"Content-Type": "text/html"}
        )
        client = make_client(Recorder(response))

        with pytest.raises(MfsInvalidResponseError, match="text/html"):
            client.files_ls("/")

    def test_invalid_json(self):
        response = httpx.Response(
            200, content=b"{not json", headers={"Content-Type": "application/json"}
        )
        client = make_client(Recorder(response))

        with pytest.raises(MfsInvalidResponseError):
            client.files_flush("/")

    def test_unencodable_path(self):
        recorder = Recorder()
        client = make_client(recorder)

        with pytest.raises(MfsInvalidRequestError, match="files/mkdir"):
            client.files_mkdir("/bad\udcff")
        assert recorder.requests == []
