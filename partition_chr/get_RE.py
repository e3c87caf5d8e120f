import logging
import argparse
from dataclasses import dataclass

import argcomplete
from Bio import SeqIO

from partition_chr.errors import ParseError

logger = logging.getLogger('partition_chr')


@dataclass
class ContigInfo:
    name: str
    recounts: int
    length: int
    skip: bool = False


def parse_int(value, path, line, column, minimum=None):
    try:
        number = int(value)
    except ValueError:
        raise ParseError(path, line, column, value, "integer") from None
    if minimum is not None and number < minimum:
        raise ParseError(path, line, column, value, f"integer >= {minimum}")
    return number


def read_REs(REFile, logger=logger):
    """
    Read the three-column RE file

    #Contig    RECounts    Length

    Returns the contigs in file order, the name -> index map and the largest
    RE count, which is the anchor for link normalization.
    """
    contigs = []
    contig_to_idx = {}
    longest_RE = 0
    with open(REFile, 'r') as fp:
        for line_no, line in enumerate(fp, 1):
            if not line.strip() or line.startswith("#"):
                continue
            line = line.rstrip('\r\n').split('\t')
            if len(line) < 3:
                raise ParseError(REFile, line_no, len(line) + 1, '\t'.join(line), "3 tab-separated columns")
            name = line[0]
            recounts = parse_int(line[1], REFile, line_no, 2, minimum=0)
            length = parse_int(line[2], REFile, line_no, 3, minimum=0)
            if name in contig_to_idx:
                raise ParseError(REFile, line_no, 1, name, "unique contig name")

            contig_to_idx[name] = len(contigs)
            contigs.append(ContigInfo(name, recounts, length))
            longest_RE = max(longest_RE, recounts)

    logger.info(f"Loaded {len(contigs)} contig RE lengths for normalization from `{REFile}`")
    return contigs, contig_to_idx, longest_RE


def write_RE(output_file, contigs):
    with open(output_file, "w") as f:
        f.write("#Contig\tRECounts\tLength\n")
        for contig in contigs:
            f.write(f"{contig.name}\t{contig.recounts}\t{contig.length}\n")


def count_restriction_sites(fasta_file, enzyme_site):

    result = []

    enzyme_site = enzyme_site.lower()

    for record in SeqIO.parse(fasta_file, "fasta"):
        sequence = str(record.seq).lower()
        count = int(sequence.count(enzyme_site)) + 1
        seq_length = len(sequence)
        result.append(ContigInfo(record.id, count, seq_length))

    return result


def main(argv=None):
    parser = argparse.ArgumentParser(prog='get_RE', description="Count restriction sites of each contig in a fasta file.")
    parser.add_argument("-f", "--fasta", required=True, help="fasta file.")
    parser.add_argument("-e", "--enzyme_site", default="GATC", help="restriction enzyme site. Default: GATC.")
    parser.add_argument("-op", "--output_prefix", required=True, help="Prefix for output files.")

    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    contigs = count_restriction_sites(args.fasta, args.enzyme_site)
    write_RE(f"{args.output_prefix}.RE_counts.txt", contigs)


if __name__ == "__main__":
    main()
