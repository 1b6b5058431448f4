"""Tests for graph6 decoding and graph set loading."""

import logging

import pytest

from pennyhull.graph6 import (
    PennyGraph,
    load_graph6_file,
    load_graph_sets,
    parse_graph6,
    parse_graph6_codes,
)


class TestParseGraph6:
    def test_single_edge(self):
        graph = parse_graph6("A_")
        assert graph.nodes == (0, 1)
        assert graph.edges == ((0, 1),)

    def test_triangle(self):
        graph = parse_graph6("Bw")
        assert graph.order == 3
        assert graph.edges == ((0, 1), (0, 2), (1, 2))

    def test_star(self):
        graph = parse_graph6("CF")
        assert graph.edges == ((0, 3), (1, 3), (2, 3))
        assert graph.degree(3) == 3
        assert graph.degree(0) == 1

    def test_path(self):
        assert parse_graph6("Bo").edges == ((0, 1), (0, 2))

    def test_header_is_stripped(self):
        assert parse_graph6(">>graph6<<Bw") == parse_graph6("Bw")

    def test_surrounding_whitespace(self):
        assert parse_graph6("  Bw\n") == parse_graph6("Bw")

    def test_empty_graph(self):
        assert parse_graph6("?") == PennyGraph(nodes=(), edges=())

    def test_long_size_form(self):
        graph = parse_graph6("~??~" + "?" * 326)
        assert graph.order == 63
        assert graph.edges == ()

    @pytest.mark.parametrize("code", ["", "   ", ">>graph6<<"])
    def test_empty_code(self, code):
        with pytest.raises(ValueError):
            parse_graph6(code)

    def test_invalid_character(self):
        with pytest.raises(ValueError, match="Invalid graph6 character"):
            parse_graph6("A!")

    def test_too_short(self):
        with pytest.raises(ValueError, match="too short"):
            parse_graph6("C")

    def test_truncated_long_header(self):
        with pytest.raises(ValueError, match="Unsupported"):
            parse_graph6("~??")


class TestLoading:
    def test_parse_codes_skips_blanks(self):
        graphs = parse_graph6_codes(["Bw", "", "  ", "A_"])
        assert [g.order for g in graphs] == [3, 2]

    def test_load_file(self, tmp_path):
        path = tmp_path / "graphs3.txt"
        path.write_text("Bw\nBo\n\n", encoding="utf-8")
        graphs = load_graph6_file(path)
        assert len(graphs) == 2
        assert graphs[0].edges == ((0, 1), (0, 2), (1, 2))

    def test_load_sets(self, tmp_path, caplog):
        (tmp_path / "graphs3.txt").write_text("Bw\nBo\n", encoding="utf-8")
        (tmp_path / "graphs4.txt").write_text("CF\n", encoding="utf-8")
        (tmp_path / "graphs8_extra.txt").write_text("A_\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="pennyhull.graph6"):
            sets = load_graph_sets(tmp_path, contact_numbers=(3, 4, 5))
        assert [label for label, _ in sets] == ["3 disks", "4 disks", "8 disks (extra)"]
        assert [len(graphs) for _, graphs in sets] == [2, 1, 1]
        assert "graphs5.txt" in caplog.text

    def test_load_sets_empty_directory(self, tmp_path):
        assert load_graph_sets(tmp_path, contact_numbers=()) == []
