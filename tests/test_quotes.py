import pytest
import requests

from b3_signal_engine.cache import TTLCache
from b3_signal_engine.config import EngineConfig
from b3_signal_engine.quotes import QuoteFetchError, YahooChartClient, parse_chart
from b3_signal_engine.recommender import scan_universe


def _payload(closes, highs=None, lows=None, volumes=None, start=1704153600):
    n = len(closes)
    return {
        "chart": {
            "result": [{
                "timestamp": [start + 86400 * i for i in range(n)],
                "indicators": {"quote": [{
                    "close": closes,
                    "high": highs if highs is not None else [c + 0.1 if c is not None else None for c in closes],
                    "low": lows if lows is not None else [c - 0.1 if c is not None else None for c in closes],
                    "volume": volumes if volumes is not None else [1000] * n,
                }]},
            }],
            "error": None,
        }
    }


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.bad_json:
            raise ValueError("not json")
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.headers = {}
        self.responses = responses
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        resp = self.responses.get(url)
        if isinstance(resp, Exception):
            raise resp
        return resp


BASE = EngineConfig().quote_base_url


def _client(responses, cfg=None, sleeps=None):
    cfg = cfg or EngineConfig(fetch_pace_sec=0.5, cache_ttl_sec=60)
    session = FakeSession(responses)
    sleep = (sleeps.append if sleeps is not None else (lambda s: None))
    return YahooChartClient(cfg, session=session, cache=TTLCache(cfg.cache_ttl_sec), sleep=sleep), session


class TestParseChart:
    def test_null_bars_dropped(self):
        series = parse_chart(_payload([10.0, None, 11.0], volumes=[100, 200, None]))
        assert series.closes == (10.0, 11.0)
        assert series.volumes == (100.0, 0.0)
        assert series.timestamps == ("2024-01-02", "2024-01-04")

    def test_invalid_payload(self):
        with pytest.raises(QuoteFetchError):
            parse_chart({"chart": {"result": []}})


class TestClient:
    def test_fetch_uses_suffix_params_and_cache(self):
        url = f"{BASE}PETR4.SA"
        client, session = _client({url: FakeResponse(_payload([30.0, 31.0]))})
        first = client.fetch_series("petr4")
        second = client("PETR4")
        assert first is second
        assert len(session.calls) == 1
        called_url, params, timeout = session.calls[0]
        assert called_url == url
        assert params == {"interval": "1d", "range": "3mo"}
        assert timeout == 10.0
        assert "User-Agent" in session.headers

    def test_request_error_wrapped(self):
        client, _ = _client({f"{BASE}VALE3.SA": requests.ConnectionError("down")})
        with pytest.raises(QuoteFetchError, match="VALE3"):
            client.fetch_series("VALE3")

    def test_http_error_wrapped(self):
        client, _ = _client({f"{BASE}VALE3.SA": FakeResponse(status=429)})
        with pytest.raises(QuoteFetchError):
            client.fetch_series("VALE3")

    def test_bad_json_wrapped(self):
        client, _ = _client({f"{BASE}VALE3.SA": FakeResponse(bad_json=True)})
        with pytest.raises(QuoteFetchError, match="invalid JSON"):
            client.fetch_series("VALE3")

    def test_empty_series_is_an_error(self):
        client, _ = _client({f"{BASE}ITUB4.SA": FakeResponse(_payload([None, None]))})
        with pytest.raises(QuoteFetchError, match="no price data"):
            client.fetch_series("ITUB4")

    def test_fetch_many_skips_failures_and_paces(self):
        sleeps = []
        client, _ = _client(
            {
                f"{BASE}PETR4.SA": FakeResponse(_payload([30.0])),
                f"{BASE}VALE3.SA": requests.Timeout("slow"),
                f"{BASE}ITUB4.SA": FakeResponse(_payload([25.0, 26.0])),
            },
            sleeps=sleeps,
        )
        out = client.fetch_many(["PETR4", "VALE3", "ITUB4"])
        assert list(out) == ["PETR4", "ITUB4"]
        assert sleeps == [0.5, 0.5]

    def test_scan_through_client_is_paced(self):
        sleeps = []
        client, session = _client(
            {
                f"{BASE}PETR4.SA": FakeResponse(_payload([30.0, 30.5])),
                f"{BASE}VALE3.SA": FakeResponse(_payload([60.0, 59.5])),
                f"{BASE}ITUB4.SA": FakeResponse(_payload([25.0, 25.2])),
            },
            sleeps=sleeps,
        )
        tickers = ["PETR4", "VALE3", "ITUB4"]
        result = scan_universe(client, tickers, "daily")
        assert set(result.analyses) == set(tickers)
        assert len(session.calls) == 3
        assert sleeps == [0.5, 0.5]

        scan_universe(client, tickers, "daily")
        assert len(session.calls) == 3
        assert sleeps == [0.5, 0.5]
