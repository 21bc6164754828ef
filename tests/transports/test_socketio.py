import pytest
import socketio
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from eioptions import ALLOWED_CORS_ORIGIN_NONE, LockedMutationError, ServerOptions
from eioptions.transports.socketio import OriginMatcher, create_server, to_engineio_kwargs

HANDSHAKE_PATH = "/socket.io/?EIO=4&transport=polling"


async def request_handshake(sio: socketio.AsyncServer, origin: str) -> int:
    app = web.Application()
    sio.attach(app)
    async with TestClient(TestServer(app)) as client:
        resp = await client.get(HANDSHAKE_PATH, headers={"Origin": origin})
        return resp.status


def test_default_options_allow_all_origins():
    kwargs = to_engineio_kwargs(ServerOptions.new_from_default())

    assert kwargs == {
        "ping_interval": 25,
        "ping_timeout": 5,
        "cors_allowed_origins": "*",
    }


def test_origin_matcher_compares_origins_literally():
    matcher = OriginMatcher(("*", "https://a.com", "https://c.com"))

    assert matcher("https://a.com")
    assert matcher("https://c.com", {})
    assert matcher("*")
    assert not matcher("https://b.com")
    assert not matcher("https://d.com")
    assert not matcher(None)


def test_empty_origins_match_nothing():
    options = ServerOptions.new_from_default().set_allowed_cors_origins(ALLOWED_CORS_ORIGIN_NONE)

    matcher = to_engineio_kwargs(options)["cors_allowed_origins"]

    assert isinstance(matcher, OriginMatcher)
    assert not matcher("https://a.com")
    assert not matcher("")


def test_origins_are_passed_sorted():
    options = ServerOptions.new_from_default().set_allowed_cors_origins(["b.com", "a.com"])

    matcher = to_engineio_kwargs(options)["cors_allowed_origins"]

    assert matcher.sorted_origins == ("a.com", "b.com")


def test_create_server_locks_options_and_configures_engineio():
    options = (
        ServerOptions.new_from_default()
        .set_ping_interval(1500)
        .set_ping_timeout(500)
        .set_allowed_cors_origins(["https://b.com", "https://a.com"])
    )

    sio = create_server(options)

    assert isinstance(sio, socketio.AsyncServer)
    assert options.locked
    assert sio.eio.ping_interval == 1.5
    assert sio.eio.ping_timeout == 0.5
    assert sio.eio.cors_allowed_origins.sorted_origins == ("https://a.com", "https://b.com")
    with pytest.raises(LockedMutationError):
        options.set_ping_interval(1)


def test_create_server_rejects_overriding_option_arguments():
    options = ServerOptions.new_from_default()

    with pytest.raises(ValueError):
        create_server(options, cors_allowed_origins="*")

    assert not options.locked


async def test_server_without_allowed_origins_rejects_every_origin():
    options = ServerOptions.new_from_default().set_allowed_cors_origins(ALLOWED_CORS_ORIGIN_NONE)

    status = await request_handshake(create_server(options), "https://evil.com")

    assert status == 400


async def test_server_with_star_origin_still_rejects_other_origins():
    options = ServerOptions.new_from_default().set_allowed_cors_origins(["*", "https://a.com"])

    status = await request_handshake(create_server(options), "https://evil.com")

    assert status == 400


async def test_server_accepts_allowed_origin():
    options = ServerOptions.new_from_default().set_allowed_cors_origins(
        ["https://b.com", "https://a.com"]
    )

    status = await request_handshake(create_server(options), "https://a.com")

    assert status == 200


async def test_server_with_default_options_accepts_any_origin():
    status = await request_handshake(
        create_server(ServerOptions.new_from_default()), "https://evil.com"
    )

    assert status == 200
