"""Unit tests for ResolutionChain use case."""

from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from zapstore.adapters.fakes import FakeEventQuery
from zapstore.adapters.ports import EventQueryPort
from zapstore.domain.descriptors import DEFAULT_BLOB_STORE_URL, ReleaseDescriptor
from zapstore.domain.events import KIND_APP, KIND_RELEASE
from zapstore.domain.exceptions import NotFoundError, TransportError, ZapstoreError
from zapstore.domain.platform import PlatformTag, detect
from zapstore.usecases.resolution_chain import ResolutionChain

RELAY = "wss://relay.test"

LINUX_ELF = "application/x-executable; format=elf; arch=x86-64"


def _chain(relay: FakeEventQuery, **kwargs: object) -> ResolutionChain:
    return ResolutionChain(relay, RELAY, **kwargs)  # type: ignore[arg-type]


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.ResolutionChain")
class TestResolveApp:
    """Test the app stage."""

    def test_finds_app_for_platform(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test the app event for the platform is returned with its owner."""
        relay.publish_app("tool", pubkey="owner", name="Tool")

        app = _chain(relay).resolve_app("tool", linux_platform)

        assert app.app_id == "tool"
        assert app.pubkey == "owner"
        assert app.name == "Tool"

    def test_queries_with_platform_and_limit(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test the query filters by kind, id and platform, limit 1."""
        relay.publish_app("tool")

        _chain(relay, timeout=7.0).resolve_app("tool", linux_platform)

        endpoint, event_filter, timeout = relay.calls[0]
        assert endpoint == RELAY
        assert timeout == 7.0
        assert event_filter.kinds == (KIND_APP,)
        assert event_filter.tags == {"d": ("tool",), "f": ("linux-x86_64",)}
        assert event_filter.limit == 1

    def test_app_for_other_platform_not_found(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test an app published only for another platform is not found."""
        relay.publish_app("tool", platforms=("darwin-arm64",))

        with pytest.raises(NotFoundError, match="app 'tool' not found on relay") as exc_info:
            _chain(relay).resolve_app("tool", linux_platform)

        assert exc_info.value.stage == "app"
        assert exc_info.value.app_id == "tool"


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.ResolutionChain")
class TestResolveLatestRelease:
    """Test the release stage."""

    def test_picks_highest_version(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test the highest version wins regardless of relay order."""
        relay.publish_app("tool")
        for version in ["1.0.0", "1.10.0", "1.9.0", "1.10.0-rc.1"]:
            relay.publish_release("tool", version)
        chain = _chain(relay)

        release = chain.resolve_latest_release(chain.resolve_app("tool", linux_platform))

        assert release.version_string == "1.10.0"

    def test_first_seen_wins_ties(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test equal versions keep the first event returned."""
        relay.publish_app("tool")
        first = relay.publish_release("tool", "v2.0")
        relay.publish_release("tool", "2.0.0")
        chain = _chain(relay)

        release = chain.resolve_latest_release(chain.resolve_app("tool", linux_platform))

        assert release.event == first

    def test_only_owner_releases(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test releases signed by other keys are ignored."""
        relay.publish_app("tool", pubkey="owner")
        relay.publish_release("tool", "1.0", pubkey="owner")
        relay.publish_release("tool", "9.9", pubkey="impostor")
        chain = _chain(relay)

        app = chain.resolve_app("tool", linux_platform)
        release = chain.resolve_latest_release(app)

        assert release.version_string == "1.0"
        event_filter = relay.filters[-1]
        assert event_filter.kinds == (KIND_RELEASE,)
        assert event_filter.authors == ("owner",)
        assert event_filter.tags == {"i": ("tool",)}

    def test_unversioned_releases_skipped(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test releases without a version are skipped."""
        relay.publish_app("tool")
        relay.publish_release("tool", "")
        relay.publish_release("tool", "0.1")
        chain = _chain(relay)

        release = chain.resolve_latest_release(chain.resolve_app("tool", linux_platform))

        assert release.version_string == "0.1"

    def test_no_releases(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test an app with no releases raises NotFoundError."""
        relay.publish_app("tool")
        chain = _chain(relay)
        app = chain.resolve_app("tool", linux_platform)

        with pytest.raises(NotFoundError, match="no releases found for 'tool'") as exc_info:
            chain.resolve_latest_release(app)

        assert exc_info.value.stage == "release"

    def test_only_unversioned_releases(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test an app whose releases all lack versions raises NotFoundError."""
        relay.publish_app("tool")
        relay.publish_release("tool", "")
        chain = _chain(relay)
        app = chain.resolve_app("tool", linux_platform)

        with pytest.raises(NotFoundError, match="no versioned releases found for 'tool'"):
            chain.resolve_latest_release(app)


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.ResolutionChain")
class TestResolveAsset:
    """Test the asset stage."""

    def test_no_asset_refs(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test a release without e tags fails before querying."""
        relay.publish_app("tool")
        relay.publish_release("tool", "1.0")
        chain = _chain(relay)
        release = chain.resolve_latest_release(chain.resolve_app("tool", linux_platform))
        relay.clear_calls()

        with pytest.raises(NotFoundError, match="release has no asset references") as exc_info:
            chain.resolve_asset(release, linux_platform, app_id="tool")

        assert exc_info.value.stage == "asset"
        assert relay.calls == []

    def test_matches_platform_tag(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test the asset with the exact platform tag is chosen."""
        mac = relay.publish_asset(b"mac", platform="darwin-arm64")
        linux = relay.publish_asset(b"linux", platform="linux-x86_64", url="https://e.com/tool")
        relay.publish_app("tool")
        relay.publish_release("tool", "1.0", asset_ids=(mac.id, linux.id))

        resolved = _chain(relay).resolve("tool", linux_platform)

        assert resolved.asset.event_id == linux.id
        assert resolved.asset.url == "https://e.com/tool"

    def test_queries_referenced_ids(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test the asset query names the release's references and the platform."""
        asset = relay.publish_asset(b"linux")
        relay.publish_app("tool")
        relay.publish_release("tool", "1.0", asset_ids=(asset.id,))

        _chain(relay).resolve("tool", linux_platform)

        event_filter = relay.filters[-1]
        assert event_filter.ids == (asset.id,)
        assert event_filter.tags == {"f": ("linux-x86_64",)}

    def test_mime_fallback(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test an asset without an f tag is accepted by compatible MIME type."""
        asset = relay.publish_asset(b"elf", platform="", mime=LINUX_ELF)
        release = ReleaseDescriptor.from_event(relay.publish_release("tool", "1.0", asset_ids=(asset.id,)))
        assert release is not None
        # A relay that ignores the f-tag constraint
        query = Mock(spec=EventQueryPort)
        query.query_events.return_value = [asset]

        chosen = ResolutionChain(query, RELAY).resolve_asset(release, linux_platform)

        assert chosen.event_id == asset.id
        assert chosen.url == DEFAULT_BLOB_STORE_URL + asset.tag_value("x")

    def test_first_compatible_asset_wins(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test the first compatible asset in relay order is chosen."""
        by_mime = relay.publish_asset(b"a", platform="", mime=LINUX_ELF)
        by_tag = relay.publish_asset(b"b")
        wrong = relay.publish_asset(b"c", platform="darwin-arm64")
        release = ReleaseDescriptor.from_event(
            relay.publish_release("tool", "1.0", asset_ids=(wrong.id, by_mime.id, by_tag.id))
        )
        assert release is not None
        query = Mock(spec=EventQueryPort)
        query.query_events.return_value = [wrong, by_mime, by_tag]

        chosen = ResolutionChain(query, RELAY).resolve_asset(release, linux_platform)

        assert chosen.event_id == by_mime.id

    def test_incompatible_assets(self, relay: FakeEventQuery) -> None:
        """Test no matching asset raises NotFoundError naming the platform."""
        asset = relay.publish_asset(b"mac", platform="darwin-arm64")
        relay.publish_app("tool", platforms=("linux-aarch64",))
        relay.publish_release("tool", "1.0", asset_ids=(asset.id,))
        platform = detect("linux", "aarch64")

        with pytest.raises(NotFoundError, match="no assets found for platform linux-aarch64"):
            _chain(relay).resolve("tool", platform)

    def test_custom_blob_store(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test hash-only assets use the configured blob store."""
        asset = relay.publish_asset(b"bin")
        relay.publish_app("tool")
        relay.publish_release("tool", "1.0", asset_ids=(asset.id,))

        resolved = _chain(relay, blob_store_url="https://blobs.test/").resolve("tool", linux_platform)

        assert resolved.asset.url == "https://blobs.test/" + asset.tag_value("x")


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.ResolutionChain")
class TestResolutionErrors:
    """Test transport failures are reported with context."""

    def test_library_error_wrapped(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test a transport library error becomes TransportError."""
        cause = httpx.ConnectError("Connection refused")
        relay.set_exception(cause)

        with pytest.raises(TransportError, match="querying app 'tool': Connection refused") as exc_info:
            _chain(relay).resolve("tool", linux_platform)

        assert exc_info.value.original_error is cause
        assert exc_info.value.url == RELAY

    def test_transport_error_gets_context(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test a TransportError from the adapter is re-raised with context."""
        relay.set_exception(TransportError("Relay returned invalid JSON", url="https://relay.test"))

        with pytest.raises(TransportError, match="querying app 'tool': Relay returned invalid JSON") as exc_info:
            _chain(relay).resolve_app("tool", linux_platform)

        assert exc_info.value.url == "https://relay.test"

    def test_other_zapstore_errors_pass_through(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test non-transport package errors are not rewrapped."""
        error = ZapstoreError("boom")
        relay.set_exception(error)

        with pytest.raises(ZapstoreError) as exc_info:
            _chain(relay).resolve_app("tool", linux_platform)

        assert exc_info.value is error


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.ResolutionChain")
class TestSearch:
    """Test app search."""

    def test_search_for_platform(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test search returns apps for the platform matching the text."""
        relay.publish_app("ripgrep", summary="Fast grep")
        relay.publish_app("fd", summary="Find files")
        relay.publish_app("grepmac", platforms=("darwin-arm64",), summary="grep for mac")

        apps = _chain(relay).search("grep", linux_platform)

        assert [app.app_id for app in apps] == ["ripgrep"]
        event_filter = relay.filters[-1]
        assert event_filter.search == "grep"
        assert event_filter.limit == 20

    def test_search_no_results(self, relay: FakeEventQuery, linux_platform: PlatformTag) -> None:
        """Test an unmatched search returns an empty list."""
        assert _chain(relay).search("nothing", linux_platform) == []
