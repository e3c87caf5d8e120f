import os
import logging

from partition_chr.get_RE import write_RE

logger = logging.getLogger('partition_chr')


def output_base(contigs_file, output_dir=None):
    base = os.path.splitext(contigs_file)[0]
    if output_dir:
        base = os.path.join(output_dir, os.path.basename(base))
    return base


def split_RE(contigs, clusters, contigs_file, k, output_dir=None, logger=logger):
    """
    Write the RE file rows of each cluster to `<base>.<k>g<n>.txt`
    """
    base = output_base(contigs_file, output_dir)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    out_RE_files = []
    for j in sorted(clusters):
        group_contigs = [contigs[idx] for idx in clusters[j]]
        outfile = f"{base}.{k}g{j + 1}.txt"
        write_RE(outfile, group_contigs)
        logger.info(f"Write {len(group_contigs)} contigs to `{outfile}`")
        out_RE_files.append(outfile)
    return out_RE_files


def write_clusters(contigs, clusters, output_file, logger=logger):
    with open(output_file, 'w') as file:
        for j in sorted(clusters):
            names = [contigs[idx].name for idx in clusters[j]]
            file.write(f"group{j + 1}\t{len(names)}\t{' '.join(names)}\n")
    logger.info(f"Write {len(clusters)} clusters to `{output_file}`")
    return output_file
