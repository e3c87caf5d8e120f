class PartitionError(Exception):
    """
    base class for errors that abort a partition run
    """
    pass


class ParseError(PartitionError, ValueError):
    """
    raised when a row of the RE table or the dist table can not be converted
    to the expected column types
    """

    def __init__(self, path, line, column, value, expected):
        self.path = path
        self.line = line
        self.column = column
        self.value = value
        self.expected = expected
        super().__init__(
            f"{path}: line {line}, column {column}: cannot parse {value!r} as {expected}"
        )


class UnknownContigError(PartitionError, KeyError):
    """
    raised when the dist table names a contig that is not in the RE table
    """

    def __init__(self, path, line, name):
        self.path = path
        self.line = line
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"{self.path}: line {self.line}: contig {self.name!r} not found in the RE file"


class ZeroREError(PartitionError, ZeroDivisionError):
    """
    raised when an edge has zero RE sites on either side, which makes the
    link normalization undefined
    """

    def __init__(self, edge):
        self.edge = edge
        super().__init__(
            f"edge {edge.at} - {edge.bt} (line {edge.line}) has RE1={edge.RE1}, RE2={edge.RE2}; "
            "cannot normalize links by zero RE sites"
        )


class ClusterError(PartitionError, RuntimeError):
    """
    raised when the clustering step does not produce a valid partition into K groups
    """
    pass
