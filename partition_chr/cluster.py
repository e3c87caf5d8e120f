import random
import logging

import numpy as np
import pandas as pd
import igraph as ig
import networkx as nx
from scipy.sparse import issparse, triu
from sklearn.cluster import SpectralClustering

from partition_chr.errors import ClusterError

logger = logging.getLogger('partition_chr')

SEED = 42


def active_affinity(matrix, active):
    """
    Affinity matrix of the active contigs. The link matrix may be asymmetric
    after skip_repeats, so each pair gets the mean of its two directions.
    """
    if issparse(matrix):
        A = matrix.tocsr()[active][:, active].astype(float)
    else:
        A = matrix[np.ix_(active, active)].astype(float)
    return (A + A.T) / 2


def upper_edges(A):
    if issparse(A):
        upper = triu(A, k=1).tocoo()
        return upper.row, upper.col, upper.data
    rows, cols = np.nonzero(np.triu(A, k=1))
    return rows, cols, A[rows, cols]


def spectral_cluster(A, k, logger=logger):
    logger.info(f"Running SpectralClustering with k={k}.")
    sc = SpectralClustering(
        n_clusters=k,
        affinity='precomputed',
        assign_labels='kmeans',
        random_state=SEED,
        n_init=20
    )
    try:
        return sc.fit_predict(A)
    except (ValueError, np.linalg.LinAlgError) as e:
        raise ClusterError(f"SpectralClustering failed with k={k}: {e}") from e


def multilevel_cluster(A, k, logger=logger, r_min=0.01, r_max=3.0, tolerance=0.001):
    """
    Louvain clustering with a binary search for the resolution that gives
    exactly k communities.
    """
    rows, cols, weights = upper_edges(A)
    g = ig.Graph(n=A.shape[0])
    g.add_edges(list(zip(rows.tolist(), cols.tolist())))
    g.es['weight'] = [float(w) for w in weights]

    r = 1.0
    r_start, r_end = r_min, r_max
    while r_start <= r <= r_end:
        if r_end - r_start < tolerance:
            logger.warning(f"r adjustment range is too small ({r_end - r_start:.4f} < {tolerance}). Stopping search.")
            break

        logger.info(f"Trying r={r:.4f} (range: [{r_start:.4f}, {r_end:.4f}])")
        # igraph draws from the random module
        random.seed(SEED)
        communities = g.community_multilevel(weights='weight', resolution=r)
        cluster_count = len(communities)
        logger.info(f"Current cluster count: {cluster_count}")

        if cluster_count == k:
            return communities.membership
        elif cluster_count > k:
            r_end = r
        else:
            r_start = r
        r = (r_start + r_end) / 2

    raise ClusterError(f"multilevel clustering could not reach {k} clusters, try --method spectral")


CLUSTER_METHODS = {
    'spectral': spectral_cluster,
    'multilevel': multilevel_cluster,
}


def labels_to_clusters(labels, active):
    results = pd.DataFrame({'Node': active, 'Cluster_ID': labels})
    summary_dict = results.groupby('Cluster_ID')['Node'].apply(list).to_dict()

    groups = sorted((sorted(int(node) for node in group) for group in summary_dict.values()), key=lambda group: group[0])
    return {idx: group for idx, group in enumerate(groups)}


def make_trivial_clusters(contigs):
    """A single cluster containing all contigs except the skipped ones."""
    return {0: [i for i, contig in enumerate(contigs) if not contig.skip]}


def check_clusters(clusters, contigs, k):
    if sorted(clusters) != list(range(k)):
        raise ClusterError(f"expected cluster ids 0..{k - 1}, got {sorted(clusters)}")

    seen = set()
    for idx, group in clusters.items():
        if not group:
            raise ClusterError(f"cluster {idx} is empty")
        for i in group:
            if not 0 <= i < len(contigs):
                raise ClusterError(f"cluster {idx} references unknown contig index {i}")
            if contigs[i].skip:
                raise ClusterError(f"cluster {idx} contains skipped contig {contigs[i].name}")
            if i in seen:
                raise ClusterError(f"contig {contigs[i].name} is assigned to more than one cluster")
            seen.add(i)


def cluster(matrix, contigs, k, method='spectral', logger=logger):
    """
    Partition the contigs that are not skipped into k groups

    Returns {cluster_id: [contig indices]}, indices ascending within a
    cluster and clusters ordered by their first index. The same inputs
    always give the same clusters.
    """
    if method not in CLUSTER_METHODS:
        raise ValueError(f"unknown clustering method {method!r}, choose from {sorted(CLUSTER_METHODS)}")

    active = [i for i, contig in enumerate(contigs) if not contig.skip]
    logger.info(f"Clustering {len(active)} of {len(contigs)} contigs into {k} groups")
    if len(active) < k:
        raise ClusterError(f"only {len(active)} contigs left after filtering, cannot make {k} clusters")

    if k == 1:
        clusters = make_trivial_clusters(contigs)
    else:
        A = active_affinity(matrix, active)
        G = nx.from_scipy_sparse_array(A) if issparse(A) else nx.from_numpy_array(A)
        logger.info(f"HiC graph info : nodes -> {G.number_of_nodes()}, edges -> {G.number_of_edges()}, "
                    f"components -> {nx.number_connected_components(G)}")

        labels = CLUSTER_METHODS[method](A, k, logger=logger)
        clusters = labels_to_clusters(labels, active)

    check_clusters(clusters, contigs, k)
    for idx, group in clusters.items():
        logger.info(f"group{idx + 1}: {len(group)} contigs")
    return clusters
