"""
Pytest configuration and fixtures for the node catalog and cache tests.
"""
import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from n8n_catalog.catalog.fetchers import NodeTypeFetcher


class FakeClock:
    """Manually advanced clock returning epoch seconds"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubFetcher(NodeTypeFetcher):
    """Node type fetcher returning canned descriptors and counting calls"""

    def __init__(self, descriptors: Optional[List[Any]] = None):
        self.descriptors = descriptors or []
        self.calls = 0
        self.error: Optional[Exception] = None

    async def fetch_node_types(self) -> List[Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.descriptors)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_node_types():
    """Raw node type descriptors in the shape the n8n API returns them"""
    return [
        {
            "name": "n8n-nodes-base.httpRequest",
            "displayName": "HTTP Request",
            "description": "Makes an HTTP request and returns the response data",
            "version": [1, 2, 3],
            "group": ["output"],
            "inputs": ["main"],
            "outputs": ["main"],
            "credentials": [{"name": "httpBasicAuth", "required": False}],
            "properties": [
                {
                    "displayName": "Method",
                    "name": "method",
                    "type": "options",
                    "required": True,
                    "default": "GET",
                    "options": [
                        {"name": "GET", "value": "GET"},
                        {"name": "POST", "value": "POST"},
                    ],
                },
                {
                    "displayName": "URL",
                    "name": "url",
                    "type": "string",
                    "description": "The URL to make the request to",
                    "default": "",
                },
            ],
        },
        {
            "name": "n8n-nodes-base.webhook",
            "displayName": "Webhook",
            "description": "Starts the workflow when a webhook is called",
            "version": 1,
            "codex": {"categories": ["Core Nodes"]},
            "inputs": [],
            "outputs": ["main"],
        },
        {
            "name": "myorg.webhookTrigger",
            "displayName": "My Org Trigger",
            "description": "Listens for events from My Org",
            "version": 1,
        },
        {
            "name": "my-community-pkg.customNode",
            "displayName": "Custom Node",
            "codex": {"categories": ["Custom"]},
        },
        {
            "name": "@n8n/n8n-nodes-langchain.vectorStorePinecone",
            "displayName": "Pinecone Vector Store",
            "description": "Work with your data in a Pinecone vector store",
            "version": 1.1,
        },
    ]


@pytest.fixture
def stub_fetcher(sample_node_types):
    return StubFetcher(sample_node_types)
