"""Catalog of known runtime versions and their download state."""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Sequence

from ..errors import UnknownVersionError
from .models import DownloadState, ReleaseInfo, VersionRecord
from .normalize import normalize_version

logger = logging.getLogger(__name__)


class VersionCatalog(Mapping):
    """Read-only mapping of version identifier to :class:`VersionRecord`.

    A catalog is never changed in place. Every state transition produces a new
    catalog that shares the untouched records with its predecessor, so
    observers can detect changes by identity.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Dict[str, VersionRecord]):
        self._records = MappingProxyType(dict(records))

    @classmethod
    def seed(cls, known_versions: Sequence[ReleaseInfo]) -> "VersionCatalog":
        """Build the initial catalog, every entry in ``unknown`` state."""
        records: Dict[str, VersionRecord] = {}
        for release in known_versions:
            identifier = normalize_version(release.tag_name)
            if identifier in records:
                logger.debug("Skipping duplicate release %s", release.tag_name)
                continue
            records[identifier] = VersionRecord(identifier=identifier, release=release)
        return cls(records)

    def __getitem__(self, identifier: str) -> VersionRecord:
        try:
            return self._records[identifier]
        except KeyError:
            raise UnknownVersionError(identifier) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        states = ", ".join(f"{key}={record.state.value}" for key, record in self._records.items())
        return f"VersionCatalog({states})"

    @property
    def default_version(self) -> str:
        """The most recent known version (first seeded entry)."""
        if not self._records:
            raise UnknownVersionError("<empty catalog>")
        return next(iter(self._records))

    def ids(self) -> List[str]:
        return list(self._records)

    def state_of(self, identifier: str) -> DownloadState:
        return self[identifier].state

    def with_download_state(self, identifier: str, state: DownloadState) -> "VersionCatalog":
        """Return a catalog where only ``identifier`` is moved to ``state``."""
        record = self[identifier]
        records = dict(self._records)
        records[identifier] = record.with_state(state)
        return VersionCatalog(records)

    def reconcile(self, downloaded_ids: Iterable[str]) -> "VersionCatalog":
        """Mark every catalog entry found in ``downloaded_ids`` as ready.

        Entries missing from ``downloaded_ids`` keep their state, including
        ones still downloading. Identifiers the catalog does not know are
        ignored.
        """
        records = dict(self._records)
        for identifier in set(downloaded_ids):
            record = records.get(identifier)
            if record is not None and record.state is not DownloadState.READY:
                records[identifier] = record.with_state(DownloadState.READY)
        return VersionCatalog(records)


def seed(known_versions: Sequence[ReleaseInfo]) -> VersionCatalog:
    return VersionCatalog.seed(known_versions)


def with_download_state(catalog: VersionCatalog, identifier: str, state: DownloadState) -> VersionCatalog:
    return catalog.with_download_state(identifier, state)


def reconcile(catalog: VersionCatalog, downloaded_ids: Iterable[str]) -> VersionCatalog:
    return catalog.reconcile(downloaded_ids)
