"""Tests for key sanitizing and prefix/postfix construction."""

from statsagg.config import Config
from statsagg.keys import make_postfix, make_prefix, node_key, sanitize_key


class TestSanitizeKey:
    def test_example(self):
        assert sanitize_key("foo bar/baz!") == "foo_bar-baz"

    def test_whitespace_run_collapses(self):
        assert sanitize_key("a \t\n b") == "a_b"

    def test_safe_key_unchanged(self):
        assert sanitize_key("api.v1.requests-total_count") == "api.v1.requests-total_count"

    def test_unsafe_chars_stripped_not_replaced(self):
        assert sanitize_key("cpu%:load@host#1") == "cpuloadhost1"

    def test_substitutions_run_before_strip(self):
        assert sanitize_key("/ /") == "-_-"

    def test_bytes_key(self):
        assert sanitize_key(b"db query") == "db_query"

    def test_non_ascii_stripped(self):
        assert sanitize_key("café.hits") == "caf.hits"


class TestNodeKey:
    def test_full_node_name(self):
        assert node_key("web1@host.example.com") == "web1.host"

    def test_short_host(self):
        assert node_key("web1@host") == "web1.host"

    def test_no_host(self):
        assert node_key("web1") == "web1."


class TestPrefixPostfix:
    def test_empty_prefix(self):
        assert make_prefix(Config()) == ""

    def test_all_segments(self):
        cfg = Config(key_env="prod", key_app="web", key_team="core")
        assert make_prefix(cfg) == "prod.web.core."

    def test_skips_empty_segments(self):
        assert make_prefix(Config(key_app="web")) == "web."

    def test_no_postfix_by_default(self):
        assert make_postfix(Config(node_name="a@b.c")) == ""

    def test_node_postfix(self):
        cfg = Config(append_node=True, node_name="web1@host.example.com")
        assert make_postfix(cfg) == ".web1.host"
