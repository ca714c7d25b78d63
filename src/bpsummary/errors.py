"""
Load failures.

Any of these aborts the current load attempt only; the previously published
snapshot (if any) stays in place and the caller decides whether to retry.
"""

from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    from .mapper import ParseDiagnostics


class LoadError(RuntimeError):
    """Base class for fatal, dataset-level load failures."""


class SourceUnavailable(LoadError):
    """Raised when the raw source cannot be fetched or read."""


class EmptySource(LoadError):
    """Raised when the source is zero-length or whitespace only."""


class MissingRequiredColumn(LoadError):
    """Raised when the header lacks one or more required columns."""

    def __init__(self, missing: typing.Sequence[str]):
        self.missing = tuple(missing)
        super().__init__(f"missing required columns: {list(self.missing)}")


class NoValidRecords(LoadError):
    """Raised when every data row was rejected during parsing."""

    def __init__(self, diagnostics: "ParseDiagnostics"):
        self.diagnostics = diagnostics
        super().__init__(
            f"no valid records after parsing {diagnostics.total_rows} rows "
            f"({diagnostics.skipped_rows} skipped)"
        )
