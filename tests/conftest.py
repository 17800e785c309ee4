"""
Shared fixtures: spies for the three collaborators injected into EventsClient.

The URL spy delegates to the real TrackingUrlBuilder so tests can assert on
both the call arguments and the final URL.
"""

import os
import sys
import tempfile

_HERE = os.path.dirname(__file__)
_SRC_DIR = os.path.abspath(os.path.join(_HERE, os.pardir, 'src'))
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)

# Keep the user's config .env out of the test run.
os.environ['XDG_CONFIG_HOME'] = tempfile.mkdtemp(prefix='tracking-events-')
os.environ['TRACKING_BASE_URL'] = 'https://tracking.test'
os.environ.pop('TRACKING_TOKEN', None)
os.environ.pop('TRACKING_DEFAULT_COUNT', None)

import pytest

from adapters.url_builder import TrackingUrlBuilder
from adapters.validation import validate_required
from core.services.events import EventsClient

BASE_URL = 'https://tracking.test'


class UrlSpy:
    def __init__(self, base_url=BASE_URL):
        self.calls = []
        self.urls = []
        self._build = TrackingUrlBuilder(base_url)

    def __call__(self, *segments, query=None):
        self.calls.append((segments, dict(query or {})))
        url = self._build(*segments, query=query)
        self.urls.append(url)
        return url


class ValidateSpy:
    def __init__(self):
        self.calls = []

    async def __call__(self, fields, required):
        self.calls.append((dict(fields), list(required)))
        await validate_required(fields, required)


class FetchSpy:
    def __init__(self, body=None, error=None):
        self.calls = []
        self.body = {'data': []} if body is None else body
        self.error = error

    async def __call__(self, url, options):
        self.calls.append((url, options))
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture
def url_spy():
    return UrlSpy()


@pytest.fixture
def validate_spy():
    return ValidateSpy()


@pytest.fixture
def fetch_spy():
    return FetchSpy()


@pytest.fixture
def events_client(url_spy, validate_spy, fetch_spy):
    return EventsClient(url_spy, validate_spy, fetch_spy)
