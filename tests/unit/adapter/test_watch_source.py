"""Tests for WatchSource."""

from __future__ import annotations

import io
import zipfile
from datetime import UTC, date, datetime

import httpx
import pytest

from stormspine.adapter.watches import WatchSource
from stormspine.core.exceptions import FeedError, InvalidDateError
from stormspine.models.watch import NO_DETAILS_MESSAGE, WatchKind


NOW = datetime(2024, 5, 21, 21, 0, tzinfo=UTC)

WATCH_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2"><Document>
  <Placemark>
    <name>WW 212 TORNADO OK KS 212000Z - 220300Z</name>
    <styleUrl>#tornado</styleUrl>
  </Placemark>
  <Placemark>
    <name>WW 213 SEVERE TSTM TX 212030Z - 220400Z</name>
    <styleUrl>#svr</styleUrl>
  </Placemark>
</Document></kml>"""


def kmz(name: str, text: str) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        archive.writestr(name, text)
    return buf.getvalue()


def network_links(*hrefs: str) -> str:
    links = "".join(f"<NetworkLink><Link><href>{href}</href></Link></NetworkLink>" for href in hrefs)
    return f'<kml xmlns="http://www.opengis.net/kml/2.2"><Document>{links}</Document></kml>'


def watch_alert(number: int, zones: list[str], **extra) -> dict:
    return {
        "type": "Feature",
        "properties": {
            "id": f"urn:oid:watch.{number}.{len(zones)}",
            "event": "Tornado Watch",
            "messageType": "Alert",
            "sent": "2024-05-21T20:00:00+00:00",
            "expires": "2024-05-22T03:00:00+00:00",
            "description": f"THE NATIONAL WEATHER SERVICE HAS ISSUED TORNADO WATCH {number} IN EFFECT",
            "affectedZones": zones,
            **extra,
        },
    }


def zone(zone_id: str, lon: float, lat: float) -> dict:
    return {
        "properties": {"id": zone_id, "name": zone_id, "state": "OK", "timeZone": ["America/Chicago"]},
        "geometry": {"type": "Polygon", "coordinates": [[[lon, lat], [lon + 1, lat], [lon + 1, lat + 1]]]},
    }


@pytest.fixture
def clock(clock):
    clock.now = NOW
    return clock


def hazard_page() -> str:
    links = "".join(f'<td><a class="wblack" title="{c}%">High</a></td>' for c in (80, 60, 90, 50, 70, 40))
    return f'<html><body><table width="529"><tr>{links}</tr></table></body></html>'


# =============================================================================
# Active watches
# =============================================================================


class TestFetchActiveWatches:
    async def test_assembles_watch(self, make_http) -> None:
        zone_a = "https://api.weather.gov/zones/county/OKC027"
        zone_b = "https://api.weather.gov/zones/county/OKC109"
        zone_c = "https://api.weather.gov/zones/county/OKC125"
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            requested.append(url)
            if request.url.path == "/alerts/active":
                assert request.url.params["event"] == "tornado watch"
                return httpx.Response(
                    200,
                    json={
                        "features": [
                            watch_alert(212, [zone_a, zone_b]),
                            watch_alert(212, [zone_c]),
                            watch_alert(0, [], description="no number here"),
                        ]
                    },
                )
            if url == zone_a:
                return httpx.Response(200, json=zone("OKC027", -97.0, 35.0))
            if url == zone_b:
                return httpx.Response(500)
            if url == zone_c:
                return httpx.Response(200, json=zone("OKC125", -96.0, 35.0))
            if url.endswith("/products/watch/2024/ww0212.html"):
                return httpx.Response(200, text=hazard_page())
            return httpx.Response(404)

        async with WatchSource(http=make_http(handler)) as source:
            watches = await source.fetch_active_tornado_watches()

        assert len(watches) == 1
        watch = watches[0]
        assert watch.number == 212
        assert watch.kind is WatchKind.TORNADO
        assert [county.id for county in watch.counties] == ["OKC027", "OKC125"]
        assert watch.center is not None
        assert watch.hazards is not None
        assert watch.hazards.tornadoes.chance == 80
        assert source.last_fetch_count == 1
        # one undecodable alert, one failed zone
        assert source.last_fetch_errors == 2
        assert requested.count(zone_a) == 1

    async def test_missing_hazard_page_leaves_hazards_unset(self, make_http) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/alerts/active":
                return httpx.Response(200, json={"features": [watch_alert(300, [])]})
            return httpx.Response(404)

        async with WatchSource(http=make_http(handler)) as source:
            watches = await source.fetch_active_watches(WatchKind.TORNADO)

        assert watches[0].hazards is None

    async def test_alerts_failure_is_feed_error(self, make_http) -> None:
        source = WatchSource(http=make_http(lambda request: httpx.Response(503)))
        with pytest.raises(FeedError) as exc_info:
            await source.fetch_active_severe_thunderstorm_watches()
        assert exc_info.value.source == "spc.watches"

    async def test_rate_limited_zone_is_skipped(self, make_http) -> None:
        good = "https://api.weather.gov/zones/county/OKC027"
        limited = "https://api.weather.gov/zones/county/OKC109"

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            if request.url.path == "/alerts/active":
                return httpx.Response(200, json={"features": [watch_alert(212, [good, limited])]})
            if url == good:
                return httpx.Response(200, json=zone("OKC027", -97.0, 35.0))
            if url == limited:
                return httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
            return httpx.Response(404)

        async with WatchSource(http=make_http(handler)) as source:
            watches = await source.fetch_active_watches(WatchKind.TORNADO)

        assert [watch.number for watch in watches] == [212]
        assert [county.id for county in watches[0].counties] == ["OKC027"]
        assert source.last_fetch_errors == 1

    async def test_unexpected_sub_fetch_failures_keep_siblings(self, make_http) -> None:
        """A zone or hazard page failing with a non-feed error only drops that piece."""
        good = "https://api.weather.gov/zones/county/OKC027"
        broken = "https://api.weather.gov/zones/county/OKC109"

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            if request.url.path == "/alerts/active":
                return httpx.Response(200, json={"features": [watch_alert(212, [good]), watch_alert(213, [broken])]})
            if url == good:
                return httpx.Response(200, json=zone("OKC027", -97.0, 35.0))
            if url == broken:
                raise RuntimeError("connection pool corrupted")
            if url.endswith("ww0212.html"):
                raise ValueError("bad page")
            return httpx.Response(404)

        async with WatchSource(http=make_http(handler)) as source:
            watches = await source.fetch_active_watches(WatchKind.TORNADO)

        by_number = {watch.number: watch for watch in watches}
        assert sorted(by_number) == [212, 213]
        assert [county.id for county in by_number[212].counties] == ["OKC027"]
        assert by_number[212].hazards is None
        assert by_number[213].counties == []


class TestFetchWatchRisks:
    async def test_placeholder_for_unpopulated_page(self, make_http) -> None:
        http = make_http(lambda request: httpx.Response(200, text="<html><body>Issued</body></html>"))
        hazards = await WatchSource(http=http).fetch_watch_risks(5, 2024)
        assert hazards.message == NO_DETAILS_MESSAGE

    async def test_empty_page(self, make_http) -> None:
        http = make_http(lambda request: httpx.Response(200, text="  "))
        assert await WatchSource(http=http).fetch_watch_risks(5, 2024) is None

    async def test_url(self, make_http) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(404)

        assert await WatchSource(http=make_http(handler)).fetch_watch_risks(7, 2023) is None
        assert seen == ["https://www.spc.noaa.gov/products/watch/2023/ww0007.html"]


# =============================================================================
# Watch boxes
# =============================================================================


class TestFetchActiveWatchBoxes:
    async def test_boxes_deduplicated_and_failures_skipped(self, make_http, clock) -> None:
        base = "https://www.spc.noaa.gov/products/watch"

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            if url.endswith("ActiveWW.kmz"):
                document = network_links(f"{base}/ww0212.kmz", f"{base}/ww0213.kmz", f"{base}/ww0214.kmz")
                return httpx.Response(200, content=kmz("ActiveWW.kml", document))
            if url.endswith("ww0214.kmz"):
                return httpx.Response(500)
            name = url.rsplit("/", 1)[-1].replace(".kmz", ".kml")
            return httpx.Response(200, content=kmz(name, WATCH_KML))

        source = WatchSource(http=make_http(handler), clock=clock)
        boxes = await source.fetch_active_watch_boxes()

        assert sorted(box.number for box in boxes) == [212, 213]
        assert source.last_fetch_errors == 1
        assert source.last_fetch_at == NOW


class TestFetchArchivedWatchBoxes:
    async def test_single_hour(self, make_http, clock) -> None:
        stamps: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            stamps.append(request.url.params["ts"])
            feature = {
                "properties": {"number": 99, "type": "SVR", "issue": "2024-05-20T15:00:00Z"},
                "geometry": None,
            }
            return httpx.Response(200, json={"features": [feature]})

        source = WatchSource(http=make_http(handler), clock=clock)
        boxes = await source.fetch_archived_watch_boxes(date(2024, 5, 20), hour=15)

        assert stamps == ["202405201500"]
        assert [box.number for box in boxes] == [99]
        assert boxes[0].kind is WatchKind.SEVERE_THUNDERSTORM

    async def test_whole_day_deduplicates(self, make_http, clock) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            feature = {"properties": {"number": 42, "type": "TOR", "issue": "2024-05-20T15:00:00Z"}}
            return httpx.Response(200, json={"features": [feature]})

        boxes = await WatchSource(http=make_http(handler), clock=clock).fetch_archived_watch_boxes(
            date(2024, 5, 20)
        )
        assert [box.number for box in boxes] == [42]

    @pytest.mark.parametrize(("day", "hour"), [(date(2024, 5, 22), None), (date(2024, 5, 20), 24)])
    async def test_invalid_arguments(self, make_http, clock, day, hour) -> None:
        source = WatchSource(http=make_http(lambda request: httpx.Response(200)), clock=clock)
        with pytest.raises(InvalidDateError):
            await source.fetch_archived_watch_boxes(day, hour)
