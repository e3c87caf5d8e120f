import logging
from dataclasses import dataclass

from partition_chr.errors import ParseError, UnknownContigError
from partition_chr.get_RE import parse_int

logger = logging.getLogger('partition_chr')


@dataclass(frozen=True)
class ContigPair:
    ai: int
    bi: int
    at: str
    bt: str
    RE1: int
    RE2: int
    n_observed_links: int
    n_expected_links: float
    line: int = 0


def lookup_contig(contig_to_idx, name):
    """Index of `name`, or None when the contig is not in the RE file."""
    return contig_to_idx.get(name)


def parse_float(value, path, line, column):
    try:
        return float(value)
    except ValueError:
        raise ParseError(path, line, column, value, "float") from None


def read_dist(distfile, contig_to_idx, logger=logger):
    """
    Import the contig pairs of the distfile

    #X      Y       Contig1 Contig2 RE1     RE2     ObservedLinks   ExpectedLinksIfAdjacent
    1       44      idcChr1.ctg24   idcChr1.ctg51   6612    1793    12      121.7
    1       70      idcChr1.ctg24   idcChr1.ctg52   6612    686     2       59.3

    X and Y are kept for reference only, contigs are resolved by name.
    """
    edges = []
    with open(distfile, 'r') as fp:
        for line_no, line in enumerate(fp, 1):
            if not line.strip() or line.startswith("#"):
                continue
            line = line.rstrip('\r\n').split('\t')
            if len(line) < 8:
                raise ParseError(distfile, line_no, len(line) + 1, '\t'.join(line), "8 tab-separated columns")

            ai = parse_int(line[0], distfile, line_no, 1)
            bi = parse_int(line[1], distfile, line_no, 2)
            at, bt = line[2], line[3]
            for name in (at, bt):
                if lookup_contig(contig_to_idx, name) is None:
                    raise UnknownContigError(distfile, line_no, name)
            RE1 = parse_int(line[4], distfile, line_no, 5, minimum=0)
            RE2 = parse_int(line[5], distfile, line_no, 6, minimum=0)
            n_observed_links = parse_int(line[6], distfile, line_no, 7, minimum=0)
            n_expected_links = parse_float(line[7], distfile, line_no, 8)

            edges.append(ContigPair(
                ai=ai, bi=bi,
                at=at, bt=bt,
                RE1=RE1, RE2=RE2,
                n_observed_links=n_observed_links, n_expected_links=n_expected_links,
                line=line_no,
            ))

    logger.info(f"Loaded {len(edges)} contig pairs from `{distfile}`")
    return edges
