"""
Pytest configuration and shared fixtures for SauceNAO client tests
"""
import copy
import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep the service from picking up a real key
os.environ['SAUCENAO_API_KEY'] = 'test-key'

SAMPLE_REPLY = {
    "header": {
        "user_id": 12345,
        "account_type": "1",
        "short_limit": "4",
        "long_limit": "100",
        "long_remaining": 99,
        "short_remaining": 3,
        "status": 0,
        "results_requested": 999,
        "search_depth": "128",
        "minimum_similarity": 30.5,
        "query_image_display": "/userdata/abc.jpg.png",
        "query_image": "abc.jpg",
        "results_returned": 3,
    },
    "results": [
        {
            "header": {
                "similarity": "92.35",
                "thumbnail": "https://img1.saucenao.com/res/pixiv/6199/61990583_p0.jpg",
                "index_id": 5,
                "index_name": "Index #5: Pixiv Images - 61990583_p0.jpg",
                "dupes": 0,
            },
            "data": {
                "ext_urls": ["https://www.pixiv.net/member_illust.php?mode=medium&illust_id=61990583"],
                "title": "Sunset",
                "pixiv_id": 61990583,
                "member_name": "artist",
                "member_id": 1234,
            },
        },
        {
            "header": {
                "similarity": "55.10",
                "thumbnail": "https://img3.saucenao.com/booru/a/b/abc.jpg",
                "index_id": 9,
                "index_name": "Index #9: Danbooru - abc.jpg",
            },
            "data": {
                "ext_urls": [],
                "material": "original",
                "creator": "someone",
            },
        },
        {
            "header": {
                "similarity": "20.00",
                "thumbnail": "https://img3.saucenao.com/fa/x.jpg",
                "index_id": 40,
                "index_name": "Index #40: FurAffinity - x.jpg",
            },
            "data": {
                "ext_urls": ["https://www.furaffinity.net/view/1"],
                "title": "Fox",
            },
        },
    ],
}

ERROR_REPLY = {
    "header": {
        "status": -1,
        "message": "Invalid API key",
    },
}


class FakeTransport:
    """Stands in for Handler._post and records every call"""

    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    async def __call__(self, url, form):
        self.calls.append((url, form))
        return copy.deepcopy(self.reply)


@pytest.fixture
def sample_reply():
    return copy.deepcopy(SAMPLE_REPLY)


@pytest.fixture
def handler():
    from saucenao import HandlerBuilder
    return HandlerBuilder().api_key('test-key').build()


@pytest.fixture
def fake_transport(handler, monkeypatch):
    """Patch the handler so searches return SAMPLE_REPLY"""
    transport = FakeTransport(SAMPLE_REPLY)
    monkeypatch.setattr(handler, '_post', transport)
    return transport


@pytest.fixture
def error_transport(handler, monkeypatch):
    transport = FakeTransport(ERROR_REPLY)
    monkeypatch.setattr(handler, '_post', transport)
    return transport
