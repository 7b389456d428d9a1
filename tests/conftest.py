"""Shared fixtures for playground tests."""

import asyncio

import pytest

from playground.errors import ProvisioningError
from playground.versions import ReleaseInfo, StaticKnownVersions


class FakeProvisioner:
    """In-memory provisioner; ``gates`` hold a setup until the event is set."""

    def __init__(self, downloaded=()):
        self.downloaded = set(downloaded)
        self.failing = set()
        self.gates = {}
        self.setup_calls = []
        self.listing_calls = 0

    def gate(self, identifier):
        event = asyncio.Event()
        self.gates[identifier] = event
        return event

    async def setup(self, identifier):
        self.setup_calls.append(identifier)
        gate = self.gates.get(identifier)
        if gate is not None:
            await gate.wait()
        if identifier in self.failing:
            raise ProvisioningError(identifier, "archive not found")
        self.downloaded.add(identifier)

    async def get_downloaded_versions(self):
        self.listing_calls += 1
        return set(self.downloaded)


class FakeTypeDefinitions:
    def __init__(self, error=None):
        self.error = error
        self.refreshed = []

    async def refresh(self, identifier):
        self.refreshed.append(identifier)
        if self.error is not None:
            raise self.error


@pytest.fixture
def releases():
    return [ReleaseInfo(tag_name="v2.0.0"), ReleaseInfo(tag_name="v1.0.0")]


@pytest.fixture
def known_versions(releases):
    return StaticKnownVersions(releases)


@pytest.fixture
def provisioner():
    return FakeProvisioner()


@pytest.fixture
def type_definitions():
    return FakeTypeDefinitions()
