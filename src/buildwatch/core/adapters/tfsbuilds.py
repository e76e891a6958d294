from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from buildwatch.core.aggregator import ASSOCIATED_CHANGESET, BuildQuerySpec, StatusFilter
from buildwatch.core.builds import (
    BuildDefinition,
    Changeset,
    RawBuildRecord,
    VendorBuildStatus,
    last_segment,
)
from buildwatch.core.config import ServerSettings
from buildwatch.core.errors import BuildServerError

_DEFINITION_URI = "vstfs:///Build/Definition/{id}"
_BUILD_URI = "vstfs:///Build/Build/{id}"

_RESULT_TO_STATUS = {
    "succeeded": VendorBuildStatus.SUCCEEDED,
    "failed": VendorBuildStatus.FAILED,
    "partiallysucceeded": VendorBuildStatus.PARTIALLY_SUCCEEDED,
    "canceled": VendorBuildStatus.STOPPED,
    "stopped": VendorBuildStatus.STOPPED,
}

_STATUS_FILTERS = {
    StatusFilter.IN_PROGRESS: "inProgress",
    StatusFilter.ALL: "all",
}

_FRACTION_RE = re.compile(r"\.(\d+)")


def _six_digit_fraction(match: re.Match[str]) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_vendor_status(status: str | None, result: str | None) -> VendorBuildStatus:
    """Map the REST `status`/`result` pair to a VendorBuildStatus."""
    state = (status or "").lower()
    if state == "inprogress":
        return VendorBuildStatus.IN_PROGRESS
    if state == "notstarted":
        return VendorBuildStatus.NOT_STARTED
    if state == "completed":
        return _RESULT_TO_STATUS.get((result or "").lower(), VendorBuildStatus.NONE)
    return VendorBuildStatus.NONE


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse a REST timestamp; the server sends between 0 and 7 fractional digits."""
    if not raw:
        return None
    value = _FRACTION_RE.sub(_six_digit_fraction, raw.strip(), count=1)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _display_name(identity: Any) -> str | None:
    if isinstance(identity, dict):
        return identity.get("displayName") or identity.get("uniqueName")
    return None


def _definition_uri(ref: dict[str, Any]) -> str:
    return ref.get("uri") or _DEFINITION_URI.format(id=ref.get("id"))


def _parse_definition(ref: dict[str, Any]) -> BuildDefinition:
    return BuildDefinition(
        uri=_definition_uri(ref),
        name=str(ref.get("name") or ref.get("id")),
        path=ref.get("path"),
    )


class TfsBuildsAdapter:
    """Adapter around the TFS / Azure DevOps Server build REST APIs."""

    def __init__(self, client: httpx.Client, settings: ServerSettings):
        """Create a build adapter for one project on a collection."""
        self.client = client
        self.settings = settings
        self._project_path = quote(settings.project, safe="")
        self._definitions: list[BuildDefinition] | None = None

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET a project-scoped API path and return the decoded JSON body."""
        query = {"api-version": self.settings.api_version}
        query.update(params or {})
        url = f"{self._project_path}/_apis/{path}"
        try:
            response = self.client.get(url, params=query)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise BuildServerError(
                f"Build server returned {exc.response.status_code} for {exc.request.url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BuildServerError(f"Build server request failed for {url}: {exc}") from exc
        except ValueError as exc:
            raise BuildServerError(f"Build server returned invalid JSON for {url}") from exc

    def list_definitions(self, refresh: bool = False) -> list[BuildDefinition]:
        """Return all build definitions of the project, loaded once per adapter."""
        if self._definitions is not None and not refresh:
            return list(self._definitions)

        body = self._get("build/definitions")
        self._definitions = [
            _parse_definition(ref) for ref in body.get("value", []) if ref.get("id") is not None
        ]
        return list(self._definitions)

    def _get_changes(
        self,
        build_id: str,
        top: int | None = None,
        seen: dict[str, list[Changeset]] | None = None,
    ) -> list[Changeset]:
        if seen is not None and build_id in seen:
            return seen[build_id]
        params = {"$top": top} if top else None
        body = self._get(f"build/builds/{build_id}/changes", params)
        changes = []
        for item in body.get("value", []):
            changes.append(
                Changeset(
                    id=str(item.get("id", "")).lstrip("C"),
                    author=_display_name(item.get("author")) or "",
                    comment=item.get("message") or "",
                )
            )
        if seen is not None:
            seen[build_id] = changes
        return changes

    def _parse_build(
        self,
        item: dict[str, Any],
        spec: BuildQuerySpec,
        seen_changes: dict[str, list[Changeset]],
    ) -> RawBuildRecord:
        ref = item.get("definition") or {}
        build_uri = item.get("uri") or _BUILD_URI.format(id=item.get("id"))
        changesets: tuple[Changeset, ...] = ()
        if ASSOCIATED_CHANGESET in spec.information_types:
            changesets = tuple(
                self._get_changes(last_segment(build_uri), seen=seen_changes)
            )
        return RawBuildRecord(
            uri=build_uri,
            definition_uri=_definition_uri(ref),
            status=parse_vendor_status(item.get("status"), item.get("result")),
            quality=item.get("quality"),
            start_time=parse_timestamp(item.get("startTime")),
            finish_time=parse_timestamp(item.get("finishTime")),
            requested_by=_display_name(item.get("requestedBy")),
            requested_for=_display_name(item.get("requestedFor")),
            last_changed_by=_display_name(item.get("lastChangedBy")),
            definition=_parse_definition(ref) if spec.eager and ref.get("name") else None,
            changesets=changesets,
            reason=str(item.get("reason") or ""),
        )

    def _query(
        self, spec: BuildQuerySpec, seen_changes: dict[str, list[Changeset]]
    ) -> list[RawBuildRecord]:
        if not spec.definition_uris:
            return []
        params: dict[str, Any] = {
            "definitions": ",".join(last_segment(uri) for uri in spec.definition_uris),
            "statusFilter": _STATUS_FILTERS[spec.status_filter],
            "queryOrder": "finishTimeDescending",
        }
        if spec.max_builds_per_definition:
            params["maxBuildsPerDefinition"] = spec.max_builds_per_definition
        body = self._get("build/builds", params)
        return [self._parse_build(item, spec, seen_changes) for item in body.get("value", [])]

    def query_builds(self, specs: Sequence[BuildQuerySpec]) -> list[list[RawBuildRecord]]:
        """Run each query spec and return the builds per spec, in order.

        A build returned by several specs has its changes fetched once.
        """
        seen_changes: dict[str, list[Changeset]] = {}
        return [self._query(spec, seen_changes) for spec in specs]

    def get_latest_changeset(self, definition: BuildDefinition) -> Changeset | None:
        """Return the newest changeset of the latest build of a definition."""
        body = self._get(
            "build/builds",
            {
                "definitions": definition.id,
                "queryOrder": "finishTimeDescending",
                "$top": 1,
            },
        )
        builds = body.get("value", [])
        if not builds:
            return None
        changes = self._get_changes(str(builds[0].get("id")), top=1)
        return changes[0] if changes else None

    def build_url(self, build_uri: str) -> str:
        """Translate a build locator into the web URL of its results page."""
        return (
            f"{self.settings.server_url}/{self._project_path}"
            f"/_build/results?buildId={last_segment(build_uri)}"
        )
