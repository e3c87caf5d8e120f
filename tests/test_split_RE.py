import os

from partition_chr.get_RE import ContigInfo, read_REs
from partition_chr.split_RE import output_base, split_RE, write_clusters


CONTIGS = [
    ContigInfo('a1', 20, 2000),
    ContigInfo('a2', 15, 2100),
    ContigInfo('b1', 30, 2500),
    ContigInfo('b2', 12, 2400, skip=True),
]


class TestSplitRE:
    """Writing one RE file per cluster."""

    def test_file_names(self, tmp_path):
        contigs_file = str(tmp_path / "counts_GATC.txt")

        out_files = split_RE(CONTIGS, {0: [0, 1], 1: [2]}, contigs_file, 2)

        assert out_files == [str(tmp_path / "counts_GATC.2g1.txt"), str(tmp_path / "counts_GATC.2g2.txt")]
        assert all(os.path.exists(f) for f in out_files)

    def test_round_trip_keeps_cluster_order(self, tmp_path):
        clusters = {0: [2, 0], 1: [1]}

        out_files = split_RE(CONTIGS, clusters, str(tmp_path / "counts_GATC.txt"), 2)

        for j, outfile in enumerate(out_files):
            contigs, _, _ = read_REs(outfile)
            expected = [(CONTIGS[i].name, CONTIGS[i].recounts, CONTIGS[i].length) for i in clusters[j]]
            assert [(c.name, c.recounts, c.length) for c in contigs] == expected

    def test_output_dir(self, tmp_path):
        out_dir = tmp_path / "groups"

        out_files = split_RE(CONTIGS, {0: [0]}, "/data/counts_GATC.txt", 1, output_dir=str(out_dir))

        assert out_files == [str(out_dir / "counts_GATC.1g1.txt")]
        assert os.path.exists(out_files[0])

    def test_output_base(self):
        assert output_base("x/counts_GATC.txt") == "x/counts_GATC"
        assert output_base("x/counts_GATC.txt", "out") == os.path.join("out", "counts_GATC")


def test_write_clusters(tmp_path):
    path = tmp_path / "clusters.txt"

    write_clusters(CONTIGS, {0: [0, 1], 1: [2]}, str(path))

    assert path.read_text() == "group1\t2\ta1 a2\ngroup2\t1\tb1\n"
