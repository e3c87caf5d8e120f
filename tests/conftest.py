import logging

import pytest


RE_TABLE = """#Contig\tRECounts\tLength
a1\t20\t2000
a2\t20\t2100
a3\t20\t1900
b1\t20\t2500
b2\t20\t2400
b3\t20\t2600
short\t5\t300
"""

# two groups of three contigs with strong links inside each group
DIST_TABLE = """#X\tY\tContig1\tContig2\tRE1\tRE2\tObservedLinks\tExpectedLinksIfAdjacent
0\t1\ta1\ta2\t20\t20\t100\t10.0
0\t2\ta1\ta3\t20\t20\t100\t10.0
1\t2\ta2\ta3\t20\t20\t100\t10.0
3\t4\tb1\tb2\t20\t20\t100\t10.0
3\t5\tb1\tb3\t20\t20\t100\t10.0
4\t5\tb2\tb3\t20\t20\t100\t10.0
0\t3\ta1\tb1\t20\t20\t1\t10.0
"""


@pytest.fixture
def RE_file(tmp_path):
    path = tmp_path / "counts_GATC.txt"
    path.write_text(RE_TABLE)
    return str(path)


@pytest.fixture
def dist_file(tmp_path):
    path = tmp_path / "counts_GATC.distribution.txt"
    path.write_text(DIST_TABLE)
    return str(path)


@pytest.fixture
def write_table(tmp_path):
    """Write `text` to a file under tmp_path and return its path."""
    def _write(name, text):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def reset_partition_logger():
    """main() attaches file and console handlers to the shared logger."""
    yield
    logger = logging.getLogger('partition_chr')
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
