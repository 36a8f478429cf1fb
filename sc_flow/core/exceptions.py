from __future__ import annotations

from typing import Optional


class ScFlowError(Exception):
    """Base exception for all sc_flow errors"""
    pass


class ConfigError(ScFlowError):
    """Invalid or inconsistent global.json / sample config"""
    pass


class GenomeMismatchError(ScFlowError):
    """
    A sample's gene order disagrees with the genome order established by the
    first sample. The matrix is left untouched.
    """

    def __init__(
        self,
        sample_id: str,
        position: int,
        expected: Optional[str],
        found: Optional[str],
    ) -> None:
        self.sample_id = sample_id
        self.position = position
        self.expected = expected
        self.found = found
        super().__init__(
            f"Sample '{sample_id}' genome not identical to the matrix genome: "
            f"position {position} expected {expected!r}, found {found!r}"
        )


class UnknownGeneError(ScFlowError, KeyError):
    """Gene identifier is not part of the genome order"""

    def __init__(self, gene_id: str) -> None:
        self.gene_id = gene_id
        super().__init__(f"{gene_id} is not in this matrix's genome")

    def __str__(self) -> str:
        return self.args[0]


class InsufficientAxesError(ScFlowError):
    """Fewer than two sample axes, so no transition can be formed"""
    pass


class BinOverflowError(ScFlowError):
    """
    A value could not be placed in any bin.

    Indicates a scale/boundary defect rather than bad data; the current redraw
    is aborted.
    """
    pass


class SampleLoadError(ScFlowError):
    """Reading or parsing a single sample file failed"""

    def __init__(self, sample_id: str, reason: str) -> None:
        self.sample_id = sample_id
        self.reason = reason
        super().__init__(f"Failed to load sample '{sample_id}': {reason}")
