"""
MCP server integration tests using the stdio protocol.

These tests start the real server process and speak JSON-RPC to it. The
lat-lng-to-tile call needs no network access; the find-units call queries
the live Macrostrat API.
"""

import json
import select
import subprocess
import sys
import time

import pytest


def _start_server() -> subprocess.Popen:
    return subprocess.Popen(
        [sys.executable, "-m", "macrostrat_mcp.server"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        bufsize=1,  # Line buffered
    )


def _send(proc: subprocess.Popen, message: dict) -> None:
    proc.stdin.write(json.dumps(message) + "\n")
    proc.stdin.flush()


def _receive(proc: subprocess.Popen, timeout: float = 10.0) -> dict:
    start_time = time.time()
    while time.time() - start_time < timeout:
        ready, _, _ = select.select([proc.stdout], [], [], 1.0)
        if ready:
            line = proc.stdout.readline().strip()
            if line:
                return json.loads(line)
    proc.terminate()
    pytest.fail(f"Server did not respond within {timeout}s. stderr: {proc.stderr.read()}")


def _initialize(proc: subprocess.Popen) -> dict:
    _send(
        proc,
        {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "initialize",
            "params": {
                "protocolVersion": "2024-11-05",
                "capabilities": {},
                "clientInfo": {"name": "test-client", "version": "1.0.0"},
            },
        },
    )
    response = _receive(proc)
    _send(proc, {"jsonrpc": "2.0", "method": "notifications/initialized"})
    return response


def _stop(proc: subprocess.Popen) -> None:
    proc.terminate()
    try:
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()


@pytest.mark.integration
def test_mcp_lat_lng_to_tile():
    """Handshake, list capabilities and call a tool that needs no network."""
    proc = _start_server()
    try:
        init_response = _initialize(proc)
        assert init_response["id"] == 1
        result = init_response["result"]
        assert result["serverInfo"]["name"] == "macrostrat"
        assert "https://tiles.macrostrat.org" in result["instructions"]

        _send(proc, {"jsonrpc": "2.0", "id": 2, "method": "tools/list"})
        tools_response = _receive(proc)
        assert tools_response["id"] == 2
        tool_names = [tool["name"] for tool in tools_response["result"]["tools"]]
        assert "lat-lng-to-tile" in tool_names
        assert "map-tiles" in tool_names

        _send(proc, {"jsonrpc": "2.0", "id": 3, "method": "prompts/list"})
        prompts_response = _receive(proc)
        prompt_names = [prompt["name"] for prompt in prompts_response["result"]["prompts"]]
        assert prompt_names == ["geologic-history", "bedrock", "geologic-map"]

        _send(
            proc,
            {
                "jsonrpc": "2.0",
                "id": 4,
                "method": "tools/call",
                "params": {
                    "name": "lat-lng-to-tile",
                    "arguments": {"lat": 40.015, "lng": -105.27, "zoom": 10},
                },
            },
        )
        tool_response = _receive(proc)
        assert tool_response["id"] == 4
        content = tool_response["result"]["content"]
        tile = json.loads(content[0]["text"])
        assert (tile["x"], tile["y"], tile["z"]) == (212, 387, 10)

        _send(
            proc,
            {
                "jsonrpc": "2.0",
                "id": 5,
                "method": "tools/call",
                "params": {"name": "lat-lng-to-tile", "arguments": {"lat": 40, "lng": 0}},
            },
        )
        error_response = _receive(proc)
        assert error_response["result"]["isError"] is True
        assert "zoom" in error_response["result"]["content"][0]["text"]
    finally:
        _stop(proc)


@pytest.mark.integration
@pytest.mark.slow  # Queries the live Macrostrat API
def test_mcp_find_units():
    """Query units under Boulder, Colorado from the live API."""
    proc = _start_server()
    try:
        _initialize(proc)
        _send(
            proc,
            {
                "jsonrpc": "2.0",
                "id": 2,
                "method": "tools/call",
                "params": {
                    "name": "find-units",
                    "arguments": {"lat": 40.015, "lng": -105.27, "responseType": "short"},
                },
            },
        )
        tool_response = _receive(proc, timeout=60)
        assert tool_response["id"] == 2
        result = tool_response["result"]
        assert not result.get("isError")
        units = json.loads(result["content"][0]["text"])
        assert isinstance(units, list)
        assert len(units) > 0
        assert "unit_id" in units[0]
    finally:
        _stop(proc)
