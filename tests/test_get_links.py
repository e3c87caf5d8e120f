import pytest

from partition_chr.errors import ParseError, UnknownContigError
from partition_chr.get_links import lookup_contig, read_dist
from partition_chr.get_RE import read_REs


class TestReadDist:
    """Loading the contig pair links."""

    def test_loads_all_pairs(self, RE_file, dist_file):
        _, contig_to_idx, _ = read_REs(RE_file)

        edges = read_dist(dist_file, contig_to_idx)

        assert len(edges) == 7
        first = edges[0]
        assert (first.at, first.bt) == ('a1', 'a2')
        assert (first.RE1, first.RE2) == (20, 20)
        assert first.n_observed_links == 100
        assert first.n_expected_links == 10.0
        assert first.line == 2

    def test_order_columns_are_informational(self, write_table):
        # X and Y disagree with the RE file order, names decide
        dist = write_table("dist.txt", "99\t98\tc2\tc1\t5\t5\t3\t1.5\n")

        edges = read_dist(dist, {'c1': 0, 'c2': 1})

        assert (edges[0].ai, edges[0].bi) == (99, 98)
        assert (edges[0].at, edges[0].bt) == ('c2', 'c1')

    def test_unknown_contig_is_an_error(self, write_table):
        dist = write_table("dist.txt", "0\t1\tc1\tmissing\t5\t5\t3\t1.5\n")

        with pytest.raises(UnknownContigError) as excinfo:
            read_dist(dist, {'c1': 0})

        assert excinfo.value.name == 'missing'
        assert excinfo.value.line == 1
        assert 'missing' in str(excinfo.value)

    def test_bad_float_reports_column(self, write_table):
        dist = write_table("dist.txt", "0\t1\tc1\tc2\t5\t5\t3\tNA?\n")

        with pytest.raises(ParseError) as excinfo:
            read_dist(dist, {'c1': 0, 'c2': 1})

        assert excinfo.value.column == 8

    def test_bad_links_reports_column(self, write_table):
        dist = write_table("dist.txt", "#header\n0\t1\tc1\tc2\t5\t5\tx\t1.5\n")

        with pytest.raises(ParseError) as excinfo:
            read_dist(dist, {'c1': 0, 'c2': 1})

        assert excinfo.value.line == 2
        assert excinfo.value.column == 7

    def test_short_row_is_rejected(self, write_table):
        dist = write_table("dist.txt", "0\t1\tc1\tc2\t5\n")

        with pytest.raises(ParseError):
            read_dist(dist, {'c1': 0, 'c2': 1})


def test_lookup_contig_returns_none_when_missing():
    assert lookup_contig({'c1': 0}, 'c1') == 0
    assert lookup_contig({'c1': 0}, 'c2') is None
