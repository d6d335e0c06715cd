# Tests/conftest.py
#
# Shared fixtures: sample registry documents, record stores and a fake registry server
#
# Imports
from typing import List, Optional
#
# Third-party imports
import httpx
import pytest
#
# Local imports
from freemind_cli.freemind_api.client import FreemindAPIClient
from freemind_cli.Registry.Entry_Record import Record
from freemind_cli.Registry.Local_State import LocalStateStore
#
############################################################################################################################
#
# Functions:

BASE_URL = "http://registry.test"

SAMPLE_REGISTRY = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    "<registry>"
    '<entry id="12"><name>Dentist</name><description>Check-up</description><due>1700000000</due></entry>'
    '<entry id="99"><name>Groceries</name><description>Milk</description></entry>'
    "</registry>"
)


class FakeRegistryServer:
    """
    Stand-in for the registry web server, served through httpx.MockTransport.

    Keeps the current document; a successful /xml/update replaces it.
    """

    def __init__(self, document: str = SAMPLE_REGISTRY, content_type: str = "text/xml",
                 fetch_status: int = 200, update_status: int = 200):
        self.document = document
        self.content_type = content_type
        self.fetch_status = fetch_status
        self.update_status = update_status
        self.entries = {}
        self.requests: List[httpx.Request] = []
        self.uploads: List[str] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/xml/fetch":
            return httpx.Response(self.fetch_status, text=self.document,
                                  headers={"content-type": self.content_type})
        if path == "/xml/update":
            body = request.content.decode("utf-8")
            self.uploads.append(body)
            if 200 <= self.update_status < 300:
                self.document = body
            return httpx.Response(self.update_status, text="")
        if path.startswith("/xml/get_by_id/"):
            entry_id = int(path.rsplit("/", 1)[1])
            if entry_id not in self.entries:
                return httpx.Response(404, text="not found", headers={"content-type": "text/plain"})
            return httpx.Response(200, text=self.entries[entry_id], headers={"content-type": self.content_type})
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def make_client(server: FakeRegistryServer, auth_method=None) -> FreemindAPIClient:
    kwargs = {}
    if auth_method is not None:
        kwargs["auth_method"] = auth_method
    return FreemindAPIClient(BASE_URL, "alice", "s3cret", transport=server.transport(), **kwargs)


def make_record(entry_id: Optional[int], title: str = "Title", description: str = "Text",
                due: Optional[int] = None, removed: bool = False) -> Record:
    return Record(id=entry_id, title=title, description=description, due=due, removed=removed)


# --- Fixtures ---

@pytest.fixture
def sample_registry() -> str:
    return SAMPLE_REGISTRY


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def server_factory():
    return FakeRegistryServer


@pytest.fixture
def client_factory():
    return make_client


@pytest.fixture
def fake_server() -> FakeRegistryServer:
    return FakeRegistryServer()


@pytest.fixture
def empty_store() -> LocalStateStore:
    return LocalStateStore()


@pytest.fixture
def synced_store() -> LocalStateStore:
    """Store that mirrors SAMPLE_REGISTRY after a completed sync."""
    store = LocalStateStore([
        make_record(12, "Dentist", "Check-up", due=1700000000),
        make_record(99, "Groceries", "Milk"),
    ])
    store.mark_synced()
    return store

#
# End of conftest.py
############################################################################################################################
