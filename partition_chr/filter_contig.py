import logging

import numpy as np
from scipy.sparse import issparse, triu

logger = logging.getLogger('partition_chr')


def skip_contigs_with_few_REs(contigs, min_REs, logger=logger):
    """Mark contigs with fewer than `min_REs` RE sites as skipped."""
    logger.info(f"skipContigsWithFewREs with MinREs = {min_REs}")
    n_short, short_RE, short_len = 0, 0, 0

    for i, contig in enumerate(contigs):
        if contig.recounts < min_REs:
            logger.debug(f"Contig #{i} ({contig.name}) has {contig.recounts} RE sites -> MARKED SHORT")
            n_short += 1
            short_RE += contig.recounts
            short_len += contig.length
            contig.skip = True

    avg_RE, avg_len = 0.0, 0
    if n_short > 0:
        avg_RE, avg_len = short_RE / n_short, short_len // n_short
    logger.info(f"Marked {n_short} contigs (avg {avg_RE:.1f} RE sites, len {avg_len}) "
                f"since they contain too few REs (MinREs = {min_REs})")

    return {'n_short': n_short, 'avg_RE': avg_RE, 'avg_len': avg_len}


def count_links(matrix):
    """
    Total links over all contig pairs i < j, and the links of each contig
    """
    if issparse(matrix):
        upper = triu(matrix, k=1)
        row_links = np.asarray(upper.sum(axis=1)).ravel()
        col_links = np.asarray(upper.sum(axis=0)).ravel()
    else:
        upper = np.triu(matrix, k=1)
        row_links = upper.sum(axis=1)
        col_links = upper.sum(axis=0)

    total_links = int(row_links.sum())
    n_links = (row_links + col_links).astype(np.int64)
    return total_links, n_links


def rescale_row(matrix, i, factor):
    if issparse(matrix):
        start, end = matrix.indptr[i], matrix.indptr[i + 1]
        row = matrix.data[start:end]
        nonzero = row != 0
        row[nonzero] = np.ceil(row[nonzero] / factor).astype(np.int64)
    else:
        nonzero = matrix[i] != 0
        matrix[i, nonzero] = np.ceil(matrix[i, nonzero] / factor).astype(np.int64)


def skip_repeats(matrix, contigs, max_link_density, logger=logger):
    """
    Mark contigs likely from repetitive regions as skipped

    A contig is repetitive when it has more links than the average contig.
    Row i of the matrix is divided by the link density factor of contig i,
    in place, so matrix[i][j] and matrix[j][i] are scaled by different
    factors and the matrix is no longer symmetric afterwards. This should be
    run after make_matrix has normalized the links by RE sites.
    """
    logger.info(f"skipRepeats with multiplicity = {max_link_density}")
    N = len(contigs)
    total_links, n_links = count_links(matrix)

    if N == 0 or total_links == 0:
        logger.warning("No Hi-C links between contigs, skipping the link density adjustment")
        logger.info(f"Marked 0 contigs (avg len 0) as repetitive (MaxLinkDensity = {max_link_density})")
        return {'n_repetitive': 0, 'avg_len': 0, 'factors': np.zeros(N)}

    n_links_avg = 2.0 * total_links / N
    factors = n_links / n_links_avg
    n_repetitive, repetitive_length = 0, 0

    for i, contig in enumerate(contigs):
        factor = factors[i]
        if factor > 0:
            rescale_row(matrix, i, factor)

        if factor >= max_link_density:
            logger.debug(f"Contig #{i} ({contig.name}) has {factor:.1f}x the average number of Hi-C links -> MARKED REPETITIVE")
            n_repetitive += 1
            repetitive_length += contig.length
            contig.skip = True

    avg_len = repetitive_length // n_repetitive if n_repetitive > 0 else 0

    # contigs reported here may already be skipped by skip_contigs_with_few_REs
    logger.info(f"Marked {n_repetitive} contigs (avg len {avg_len}) as repetitive (MaxLinkDensity = {max_link_density})")

    return {'n_repetitive': n_repetitive, 'avg_len': avg_len, 'factors': factors}
