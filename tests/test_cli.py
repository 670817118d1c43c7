import json

import pytest

from b3_signal_engine import cli
from b3_signal_engine.cli import build_parser, main
from b3_signal_engine.db import upsert_series


@pytest.fixture
def db_path(tmp_path, series_factory):
    path = str(tmp_path / "market_data.db")
    upsert_series(path, "PETR4", series_factory([30 + 0.1 * i for i in range(60)]))
    upsert_series(path, "VALE3", series_factory([60 - 0.1 * i for i in range(60)]))
    return path


def _run(capsys, argv):
    main(argv)
    return json.loads(capsys.readouterr().out)


def test_timeframes(capsys):
    out = _run(capsys, ["timeframes"])
    assert list(out) == ["daily", "weekly", "monthly", "yearly"]
    assert out["yearly"]["stop_distance"] == 0.88


def test_analyze_from_db(capsys, db_path):
    out = _run(capsys, ["--db", db_path, "--source", "db", "analyze", "--ticker", "petr4", "--timeframe", "monthly"])
    assert out["ok"] is True
    assert out["ticker"] == "PETR4"
    assert out["timeframe"] == "monthly"
    assert out["snapshot"]["price"] == pytest.approx(35.9)


def test_analyze_missing_ticker(capsys, db_path):
    out = _run(capsys, ["--db", db_path, "--source", "db", "analyze", "--ticker", "ITUB4"])
    assert out == {"ok": False, "ticker": "ITUB4", "error": "no_price_data"}


def test_scan_from_db(capsys, db_path):
    out = _run(
        capsys,
        ["--db", db_path, "--source", "db", "scan", "--tickers", "PETR4", "VALE3", "ITUB4", "--watch", "taee11", "--all"],
    )
    assert out["skipped"] == ["ITUB4"]
    assert [r["ticker"] for r in out["top"]] == ["PETR4", "VALE3"]
    assert out["watchlist"] == ["PETR4", "VALE3", "TAEE11"]
    assert set(out["analyses"]) == {"PETR4", "VALE3"}
    assert isinstance(out["alerts"], list)


def test_unknown_timeframe_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["analyze", "--ticker", "PETR4", "--timeframe", "hourly"])


class FakeClient:
    def __init__(self, cfg, series):
        self.cfg = cfg
        self.series = series

    def fetch_many(self, tickers):
        return {t.upper(): self.series for t in tickers if t.upper() != "VALE3"}


def test_import_fills_store_for_db_source(capsys, monkeypatch, tmp_path, series_factory):
    path = str(tmp_path / "imported.db")
    series = series_factory([20 + 0.1 * i for i in range(30)])
    monkeypatch.setattr(cli, "YahooChartClient", lambda cfg: FakeClient(cfg, series))

    out = _run(capsys, ["--db", path, "import", "--tickers", "petr4", "VALE3"])
    assert out["imported"] == {"PETR4": 30}
    assert out["failed"] == ["VALE3"]
    assert out["codes"] == [{"code": "PETR4", "rows": 30}]

    analyzed = _run(capsys, ["--db", path, "--source", "db", "analyze", "--ticker", "PETR4"])
    assert analyzed["ok"] is True
    assert analyzed["snapshot"]["price"] == pytest.approx(22.9)
