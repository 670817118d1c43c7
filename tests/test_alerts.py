from b3_signal_engine.alerts import AlertBook
from b3_signal_engine.models import SignalReport

STRONG = SignalReport(entry=["a", "b", "c"], exit=[], warnings=[], score=80)
WEAK = SignalReport(entry=[], exit=["Negative MACD (-0.500) - bearish momentum"], warnings=[], score=20)


def test_strong_entry_alert_and_cooldown():
    book = AlertBook(cooldown_sec=30)
    fired = book.evaluate("PETR4", STRONG, now=1000.0)
    assert [a.kind for a in fired] == ["entry"]
    assert fired[0].message == "STRONG OPPORTUNITY: PETR4 - score 80/100"

    assert book.evaluate("PETR4", STRONG, now=1010.0) == []
    assert len(book.evaluate("PETR4", STRONG, now=1030.0)) == 1
    assert len(book.alerts) == 2


def test_cooldown_is_per_ticker_and_kind():
    book = AlertBook()
    book.evaluate("PETR4", STRONG, now=0.0)
    assert len(book.evaluate("VALE3", STRONG, now=1.0)) == 1
    assert [a.kind for a in book.evaluate("PETR4", WEAK, now=2.0)] == ["exit"]


def test_exit_alert_needs_low_score():
    book = AlertBook()
    fired = book.evaluate("MGLU3", WEAK, now=5.0)
    assert fired[0].message == "SELL ALERT: MGLU3 - score 20/100"
    assert fired[0].signals == WEAK.exit
    assert book.evaluate("ABEV3", SignalReport(exit=["x"], score=40), now=5.0) == []


def test_two_entry_signals_do_not_alert():
    book = AlertBook()
    assert book.evaluate("PETR4", SignalReport(entry=["a", "b"], score=95), now=0.0) == []


def test_history_capped_newest_first():
    book = AlertBook(max_alerts=20)
    for i in range(25):
        book.evaluate(f"TICK{i}", STRONG, now=float(i))
    assert len(book.alerts) == 20
    assert book.alerts[0].ticker == "TICK24"
    assert book.alerts[-1].ticker == "TICK5"


def test_as_dict_shape():
    book = AlertBook()
    alert = book.evaluate("PETR4", STRONG, now=0.0)[0]
    d = alert.as_dict()
    assert d["type"] == "entry"
    assert d["timestamp"].startswith("1970-01-01T00:00:00")
    assert d["signals"] == ["a", "b", "c"]
