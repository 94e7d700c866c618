"""Shared pytest fixtures for jwtcodec tests."""

import pytest

from jwtcodec import TokenCodec

TEST_SECRET = "test-jwt-secret"


class FakeClock:
    """Settable epoch-millisecond clock."""

    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, millis):
        self.now += millis


@pytest.fixture
def secret():
    """The signing secret used by the codec fixture."""
    return TEST_SECRET


@pytest.fixture
def make_clock():
    """Factory for independent fake clocks."""
    return FakeClock


@pytest.fixture
def clock(make_clock):
    """A fake clock shared by the codec fixture."""
    return make_clock()


@pytest.fixture
def codec(secret, clock):
    """Codec with a fixed test secret and the fake clock."""
    return TokenCodec(secret, clock=clock)


@pytest.fixture
def app(codec):
    """Flask test app with one protected route."""
    flask = pytest.importorskip("flask")
    from jwtcodec.middleware import require_token

    flask_app = flask.Flask(__name__)
    flask_app.config["TESTING"] = True
    flask_app.config["TOKEN_CODEC"] = codec

    @flask_app.get("/me")
    @require_token
    def me():
        return flask.jsonify({"sub": flask.g.claims["sub"]})

    return flask_app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
