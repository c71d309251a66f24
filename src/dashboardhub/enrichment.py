"""External study lookups used to enrich distinct dashboard studies.

Accessions are resolved against dbGaP and canonical study metadata is read
from the FHIR study cache. Both keep their state in flat JSON cache files.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, Protocol

import requests

from dashboardhub.config import DBGAP_STUDY_URL, DashboardConfig
from dashboardhub.models import CanonicalStudy

logger = logging.getLogger(__name__)

ACCESSION_PATTERN = re.compile(r"^phs\d+\.v\d+\.p\d+$")


class StudyLookups(Protocol):
    """Lookups the study unifier needs for each distinct study."""

    async def resolve_accession(self, db_gap_id: str) -> str | None:
        ...

    async def fetch_canonical_study(self, accession: str | None) -> CanonicalStudy | None:
        ...

    def study_url(self, accession: str | None) -> str | None:
        ...

    def build_gap_id(self, db_gap_id: str, url: str | None) -> str:
        ...


def study_url(accession: str | None, base_url: str = DBGAP_STUDY_URL) -> str | None:
    """Return the dbGaP study page url for an accession."""

    if not accession:
        return None
    return f"{base_url}{accession}"


def build_gap_id(db_gap_id: str, url: str | None) -> str:
    """Return the display link for a dbGaP id, or the bare id without a url."""

    if not url:
        return db_gap_id
    return f"[{db_gap_id}]({url})"


def _read_json_cache(path: Path | None) -> dict[str, Any]:
    if path is None or not path.exists():
        return {}
    payload = json.loads(path.read_text())
    if not isinstance(payload, dict):
        raise ValueError(f"Cache file {path} must contain a JSON object")
    return payload


class DbGapAccessionResolver:
    """Resolve a dbGaP study id (``phs000007``) to its current accession.

    dbGaP redirects an unversioned study page to the latest version, so the
    accession is read from the redirected url, falling back to the page body.
    """

    def __init__(
        self,
        *,
        cache_path: str | Path | None = None,
        base_url: str = DBGAP_STUDY_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.cache_path = Path(cache_path) if cache_path is not None else None
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._cache: dict[str, str] | None = None

    def resolve(self, db_gap_id: str | None) -> str | None:
        if not db_gap_id:
            return None
        if ACCESSION_PATTERN.match(db_gap_id):
            return db_gap_id

        cache = self._load_cache()
        if db_gap_id in cache:
            return cache[db_gap_id]

        logger.debug("Resolving dbGaP accession for %s", db_gap_id)
        response = self.session.get(
            f"{self.base_url}{db_gap_id}",
            timeout=self.timeout,
            allow_redirects=True,
        )
        response.raise_for_status()

        accession = self._parse_accession(db_gap_id, response.url, response.text)
        if accession is None:
            logger.warning("No dbGaP accession found for %s", db_gap_id)
            return None

        cache[db_gap_id] = accession
        self._save_cache()
        return accession

    async def resolve_async(self, db_gap_id: str | None) -> str | None:
        return await asyncio.to_thread(self.resolve, db_gap_id)

    @staticmethod
    def _parse_accession(db_gap_id: str, url: str | None, text: str | None) -> str | None:
        pattern = re.compile(rf"{re.escape(db_gap_id)}\.v(\d+)\.p(\d+)")
        if url:
            match = pattern.search(url)
            if match:
                return match.group(0)

        # Study pages also list earlier versions; keep the latest.
        matches = list(pattern.finditer(text or ""))
        if not matches:
            return None
        latest = max(matches, key=lambda match: (int(match.group(1)), int(match.group(2))))
        return latest.group(0)

    def _load_cache(self) -> dict[str, str]:
        if self._cache is None:
            self._cache = {
                str(key): str(value)
                for key, value in _read_json_cache(self.cache_path).items()
                if value
            }
        return self._cache

    def _save_cache(self) -> None:
        if self.cache_path is None or self._cache is None:
            return
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_text(json.dumps(self._cache, indent=2, sort_keys=True))


class FhirStudyCatalog:
    """Canonical study metadata from the cached FHIR research studies.

    The cache maps an accession, or an unversioned ``phs`` id, to the
    camelCase study payload.
    """

    def __init__(self, *, cache_path: str | Path | None = None, studies: dict[str, Any] | None = None) -> None:
        self.cache_path = Path(cache_path) if cache_path is not None else None
        self._studies = studies

    def get(self, accession: str | None) -> CanonicalStudy | None:
        if not accession:
            return None

        studies = self._load()
        payload = studies.get(accession)
        if payload is None:
            payload = studies.get(accession.split(".")[0])
        if payload is None:
            return None
        return CanonicalStudy.from_payload(payload)

    def _load(self) -> dict[str, Any]:
        if self._studies is None:
            self._studies = _read_json_cache(self.cache_path)
        return self._studies


class CachedStudyLookups:
    """``StudyLookups`` backed by the dbGaP resolver and FHIR study catalog."""

    def __init__(
        self,
        *,
        resolver: DbGapAccessionResolver,
        catalog: FhirStudyCatalog,
        base_url: str = DBGAP_STUDY_URL,
    ) -> None:
        self.resolver = resolver
        self.catalog = catalog
        self.base_url = base_url

    @classmethod
    def from_config(cls, config: DashboardConfig) -> CachedStudyLookups:
        return cls(
            resolver=DbGapAccessionResolver(
                cache_path=config.accession_cache_path,
                base_url=config.dbgap_study_url,
                timeout=config.request_timeout,
            ),
            catalog=FhirStudyCatalog(cache_path=config.fhir_study_cache_path),
            base_url=config.dbgap_study_url,
        )

    async def resolve_accession(self, db_gap_id: str) -> str | None:
        return await self.resolver.resolve_async(db_gap_id)

    async def fetch_canonical_study(self, accession: str | None) -> CanonicalStudy | None:
        return self.catalog.get(accession)

    def study_url(self, accession: str | None) -> str | None:
        return study_url(accession, self.base_url)

    def build_gap_id(self, db_gap_id: str, url: str | None) -> str:
        return build_gap_id(db_gap_id, url)
