import asyncio
import os
import unittest
from unittest.mock import patch

from starlette.background import BackgroundTask

from linkserve.file_content import copier
from linkserve.file_content.metadata import resolve
from linkserve.file_content.response import LinkAwareFileResponse
from linkserve.file_content.sinks import ASGIBodySink

from tests._fs import TempDirMixin, sample_bytes


class _ASGIRecorder:
    """Collects ASGI messages; receive() blocks after the request body."""

    def __init__(self):
        self.messages = []
        self._requested = False

    async def receive(self):
        if not self._requested:
            self._requested = True
            return {"type": "http.request", "body": b"", "more_body": False}
        await asyncio.Event().wait()

    async def send(self, message):
        self.messages.append(message)

    @property
    def status(self):
        return self.messages[0]["status"]

    @property
    def headers(self):
        return {k.decode("latin-1"): v.decode("latin-1") for k, v in self.messages[0]["headers"]}

    @property
    def body(self):
        return b"".join(m.get("body", b"") for m in self.messages[1:])


def _scope(method="GET"):
    return {"type": "http", "method": method, "headers": []}


class LinkAwareFileResponseTests(TempDirMixin, unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.dir = self.make_tempdir()
        self.data = sample_bytes(100)
        self.target = self.write_file(self.dir, "target.bin", self.data)
        self.link = self.make_link(self.target, os.path.join(self.dir, "link.bin"))

    def _grow_before_copy(self, extra: bytes):
        def grow_then_resolve(path):
            with open(self.target, "ab") as f:
                f.write(extra)
            return resolve(path)

        return patch.object(copier, "resolve", side_effect=grow_then_resolve)

    async def test_body_never_exceeds_declared_length(self):
        asgi = _ASGIRecorder()
        with self._grow_before_copy(b"x" * 50):
            await LinkAwareFileResponse(self.link)(_scope(), asgi.receive, asgi.send)
        self.assertEqual(asgi.status, 200)
        self.assertEqual(asgi.headers["content-length"], "100")
        self.assertEqual(asgi.body, self.data)
        self.assertFalse(asgi.messages[-1]["more_body"])

    async def test_ranged_body_matches_content_range(self):
        asgi = _ASGIRecorder()
        with self._grow_before_copy(b"x" * 50):
            await LinkAwareFileResponse(self.link, range_header="bytes=90-")(
                _scope(), asgi.receive, asgi.send
            )
        self.assertEqual(asgi.status, 206)
        self.assertEqual(asgi.headers["content-range"], "bytes 90-99/100")
        self.assertEqual(asgi.body, self.data[90:])

    async def test_unsatisfiable_keeps_caller_headers(self):
        asgi = _ASGIRecorder()
        response = LinkAwareFileResponse(
            self.link,
            range_header="bytes=500-",
            headers={"Access-Control-Allow-Origin": "*"},
        )
        await response(_scope(), asgi.receive, asgi.send)
        self.assertEqual(asgi.status, 416)
        self.assertEqual(asgi.headers["access-control-allow-origin"], "*")
        self.assertEqual(asgi.headers["content-range"], "bytes */100")
        self.assertEqual(asgi.headers["content-length"], "0")
        self.assertEqual(asgi.body, b"")

    async def test_background_runs_on_every_path(self):
        cases = {
            "full": dict(),
            "head": dict(method="HEAD"),
            "unsatisfiable": dict(range_header="bytes=500-"),
        }
        for name, kwargs in cases.items():
            with self.subTest(case=name):
                calls = []
                asgi = _ASGIRecorder()
                response = LinkAwareFileResponse(
                    self.link, background=BackgroundTask(calls.append, name), **kwargs
                )
                await response(_scope(kwargs.get("method", "GET")), asgi.receive, asgi.send)
                self.assertEqual(calls, [name])


class ASGIBodySinkTests(unittest.IsolatedAsyncioTestCase):
    async def test_limit_truncates_and_drops(self):
        asgi = _ASGIRecorder()
        sink = ASGIBodySink(asgi.send, limit=5)
        await sink.write(b"abc")
        await sink.write(b"defg")
        await sink.write(b"hij")
        await sink.close()
        self.assertEqual(sink.bytes_written, 5)
        self.assertEqual([m["body"] for m in asgi.messages], [b"abc", b"de", b""])

    async def test_no_limit(self):
        asgi = _ASGIRecorder()
        sink = ASGIBodySink(asgi.send)
        await sink.write(b"abc")
        await sink.write(b"")
        self.assertEqual(sink.bytes_written, 3)
        self.assertEqual(len(asgi.messages), 1)


if __name__ == "__main__":
    unittest.main()
