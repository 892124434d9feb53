"""Tests for the Graphite TCP transport."""

from statsagg.reporter import GraphiteReporter

PAYLOAD = "stats.hits 0.2 1700000000\nstatsd.numStats 1 1700000000\n"


class TestSend:
    def test_delivers_payload(self, graphite):
        reporter = GraphiteReporter(graphite.host, graphite.port, timeout=2.0)
        assert reporter.send(PAYLOAD) is True
        assert graphite.wait_for(1)
        assert graphite.payloads == [PAYLOAD]

    def test_one_connection_per_send(self, graphite):
        reporter = GraphiteReporter(graphite.host, graphite.port, timeout=2.0)
        reporter.send("a 1 1\n")
        reporter.send("b 2 2\n")
        assert graphite.wait_for(2)
        assert sorted(graphite.payloads) == ["a 1 1\n", "b 2 2\n"]


class TestFailure:
    def test_connection_refused_returns_false(self, closed_port, caplog):
        reporter = GraphiteReporter("127.0.0.1", closed_port, timeout=1.0)
        assert reporter.send(PAYLOAD) is False
        assert "Failed to send report" in caplog.text


class TestDisabled:
    def test_no_destination_is_noop(self):
        reporter = GraphiteReporter(None)
        assert reporter.enabled is False
        assert reporter.destination == "<disabled>"
        assert reporter.send(PAYLOAD) is True

    def test_destination_string(self):
        assert GraphiteReporter("graphite", 2003).destination == "graphite:2003"
