import logging

import numpy as np
from scipy.sparse import coo_matrix

from partition_chr.errors import UnknownContigError, ZeroREError
from partition_chr.get_links import lookup_contig

logger = logging.getLogger('partition_chr')

# a dense int64 matrix of this many contigs takes ~20 GB
MAX_DENSE_CONTIGS = 50000


def normalize_links(edge, longest_squared):
    """Scale the observed links of an edge to the longest contig's RE count."""
    if edge.RE1 == 0 or edge.RE2 == 0:
        raise ZeroREError(edge)
    return edge.n_observed_links * longest_squared // (edge.RE1 * edge.RE2)


def collect_pair_links(edges, contig_to_idx, longest_RE):
    pair_links = {}
    longest_squared = longest_RE * longest_RE

    for e in edges:
        a = lookup_contig(contig_to_idx, e.at)
        b = lookup_contig(contig_to_idx, e.bt)
        if a is None or b is None:
            raise UnknownContigError("<edges>", e.line, e.at if a is None else e.bt)
        if a == b:
            continue

        # a repeated pair overwrites the previous weight
        w = normalize_links(e, longest_squared)
        pair_links[(a, b)] = w
        pair_links[(b, a)] = w

    return pair_links


def make_matrix(edges, contig_to_idx, longest_RE, sparse=False, logger=logger):
    """
    Create the N x N matrix of normalized link counts

    Each weight is ObservedLinks * longest_RE^2 / (RE1 * RE2), truncated to
    an integer. Returns a numpy array, or a scipy CSR matrix when `sparse` is
    set or the number of contigs exceeds MAX_DENSE_CONTIGS.
    """
    N = len(contig_to_idx)
    if not sparse and N > MAX_DENSE_CONTIGS:
        logger.warning(f"{N} contigs exceed the dense matrix limit ({MAX_DENSE_CONTIGS}), using a sparse matrix")
        sparse = True

    pair_links = collect_pair_links(edges, contig_to_idx, longest_RE)

    rows = np.fromiter((a for a, _ in pair_links), dtype=np.int64, count=len(pair_links))
    cols = np.fromiter((b for _, b in pair_links), dtype=np.int64, count=len(pair_links))
    data = np.fromiter(pair_links.values(), dtype=np.int64, count=len(pair_links))

    if sparse:
        M = coo_matrix((data, (rows, cols)), shape=(N, N), dtype=np.int64).tocsr()
        M.eliminate_zeros()
    else:
        M = np.zeros((N, N), dtype=np.int64)
        M[rows, cols] = data

    logger.info(f"Built {'sparse' if sparse else 'dense'} link matrix of {N} contigs with {len(pair_links) // 2} linked pairs")
    return M
