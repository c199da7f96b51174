"""Test doubles for the completion client and API shortcuts."""
import asyncio
from types import SimpleNamespace


def make_chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class FakeStream:
    """Async iterable of completion chunks with an OpenAI-style close()."""

    def __init__(self, deltas):
        self.deltas = list(deltas)
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for delta in self.deltas:
            yield make_chunk(delta)

    async def close(self):
        self.closed = True


class FakeCompletions:
    def __init__(self):
        self.replies = []
        self.calls = []
        self.streams = []
        self.error = None

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        deltas = self.replies.pop(0) if self.replies else ["Hello ", "there"]
        stream = FakeStream(deltas)
        self.streams.append(stream)
        return stream


class FakeOpenAI:
    def __init__(self):
        self.chat = SimpleNamespace(completions=FakeCompletions())


def signup(client, email="a@b.com", password="secret123", name=None):
    """Sign up through the API; the identity cookie lands in client's jar."""
    client.cookies.clear()
    payload = {"email": email, "password": password}
    if name is not None:
        payload["name"] = name
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["user"]


def cookie_attributes(response):
    """Lower-cased Set-Cookie attributes, without the name=value pair."""
    return [part.strip().lower() for part in response.headers["set-cookie"].split(";")[1:]]


def create_session(client, title=None):
    body = {} if title is None else {"title": title}
    response = client.post("/api/protected/sessions", json=body)
    assert response.status_code == 201, response.text
    return response.json()["session"]


class StallingStream(FakeStream):
    """Yields its deltas, then hangs as an upstream that stopped sending."""

    def __init__(self, deltas, stall_seconds=10):
        super().__init__(deltas)
        self.stall_seconds = stall_seconds

    async def _iterate(self):
        for delta in self.deltas:
            yield make_chunk(delta)
        await asyncio.sleep(self.stall_seconds)
