#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK

import os
import sys
import logging
import argparse

import argcomplete
from argcomplete.completers import FilesCompleter

from partition_chr import __version__
from partition_chr.errors import PartitionError
from partition_chr.get_RE import read_REs
from partition_chr.get_links import read_dist
from partition_chr.make_matrix import make_matrix
from partition_chr.filter_contig import skip_contigs_with_few_REs, skip_repeats
from partition_chr.cluster import CLUSTER_METHODS, cluster
from partition_chr.split_RE import output_base, split_RE, write_clusters

logger = logging.getLogger('partition_chr')

MIN_RES = 10
MAX_LINK_DENSITY = 2.0


def setup_logging(log_file: str = "partition_chr.log") -> logging.Logger:
    """Configure logging to both file and console."""
    logger = logging.getLogger('partition_chr')
    logger.setLevel(logging.INFO)

    if not logger.handlers:

        fh = logging.FileHandler(log_file)
        fh.setLevel(logging.INFO)

        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)

        formatter = logging.Formatter('%(asctime)s <%(module)s.py> [%(funcName)s] %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
        fh.setFormatter(formatter)
        ch.setFormatter(formatter)

        logger.addHandler(fh)
        logger.addHandler(ch)

    return logger


def log_start(logger: logging.Logger, script_name: str, version: str, args: argparse.Namespace):
    """Log the start of the program."""
    logger.info(f"Program started, {script_name} version: {version}")
    logger.info(f"Python version: {sys.version}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Arguments: {args}")


def run_partition(RE_file: str, dist_file: str, k: int, min_REs: int = MIN_RES,
                  max_link_density: float = MAX_LINK_DENSITY, method: str = 'spectral',
                  sparse: bool = False, output_dir: str = None, logger: logging.Logger = logger) -> dict:
    """
    Partition the contigs of `RE_file` into k groups using the Hi-C links of `dist_file`

    Stages run in order: read RE file, skip short contigs, read dist file,
    build the normalized link matrix, skip repeats, cluster, split the RE
    file by cluster. Any PartitionError aborts the run.
    """
    contigs, contig_to_idx, longest_RE = read_REs(RE_file, logger=logger)
    short_report = skip_contigs_with_few_REs(contigs, min_REs, logger=logger)

    edges = read_dist(dist_file, contig_to_idx, logger=logger)
    matrix = make_matrix(edges, contig_to_idx, longest_RE, sparse=sparse, logger=logger)
    repeat_report = skip_repeats(matrix, contigs, max_link_density, logger=logger)

    clusters = cluster(matrix, contigs, k, method=method, logger=logger)

    out_RE_files = split_RE(contigs, clusters, RE_file, k, output_dir=output_dir, logger=logger)
    cluster_file = write_clusters(contigs, clusters, f"{output_base(RE_file, output_dir)}.{k}g.clusters.txt", logger=logger)

    logger.info("Success")
    return {
        'contigs': contigs,
        'matrix': matrix,
        'clusters': clusters,
        'short_report': short_report,
        'repeat_report': repeat_report,
        'cluster_file': cluster_file,
        'out_RE_files': out_RE_files,
    }


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='partition_chr', description='Partition contigs into chromosome groups using Hi-C links.')

    base_group = parser.add_argument_group('>>> Parameters for basic data')
    base_group.add_argument("-r", "--RE_file", metavar='\b', required=True,
                            help="Contig RE file: #Contig, RECounts, Length.").completer = FilesCompleter()
    base_group.add_argument("-d", "--dist_file", metavar='\b', required=True,
                            help="Hi-C links between contig pairs (8 columns).").completer = FilesCompleter()

    genome_group = parser.add_argument_group('>>> Parameters of chromosome numbers')
    genome_group.add_argument("-k", "--k", type=int, metavar='\b', required=True, help="Number of groups to partition the contigs into.")

    filter_group = parser.add_argument_group('>>> Parameters for filtering contigs')
    filter_group.add_argument("--min_REs", type=int, metavar='\b', default=MIN_RES,
                              help=f"Minimum number of RE sites in a contig. Default: {MIN_RES}.")
    filter_group.add_argument("--max_link_density", type=float, metavar='\b', default=MAX_LINK_DENSITY,
                              help=f"Density threshold before marking contig as repetitive. Default: {MAX_LINK_DENSITY}.")

    clustering_group = parser.add_argument_group('>>> Parameter for clustering')
    clustering_group.add_argument("--method", choices=sorted(CLUSTER_METHODS), default='spectral',
                                  help="Clustering method. Default: spectral.")
    clustering_group.add_argument("--sparse", action='store_true', help="Store the link matrix as a sparse matrix.")

    output_group = parser.add_argument_group('>>> Parameter for the result file')
    output_group.add_argument("-o", "--output_dir", metavar='\b', default=None,
                              help="Directory of the output files. Default: next to the RE file.")
    output_group.add_argument("--log_file", metavar='\b', default="partition_chr.log", help="Log file. Default: partition_chr.log.")

    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    for file_arg in ['RE_file', 'dist_file']:
        file_path = getattr(args, file_arg)
        if not os.path.exists(file_path):
            parser.error(f"Required input file not found: {file_path}")
    if args.k <= 0:
        parser.error("Number of groups (-k) must be a positive integer.")
    if args.min_REs < 0:
        parser.error("--min_REs must not be negative.")
    if args.max_link_density <= 0:
        parser.error("--max_link_density must be positive.")

    return args


def main(argv=None):
    args = parse_arguments(argv)
    logger = setup_logging(args.log_file)
    log_start(logger, "partition_chr", __version__, args)

    try:
        run_partition(
            args.RE_file,
            args.dist_file,
            args.k,
            min_REs=args.min_REs,
            max_link_density=args.max_link_density,
            method=args.method,
            sparse=args.sparse,
            output_dir=args.output_dir,
            logger=logger,
        )
    except PartitionError as e:
        logger.error(f"Partition failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
