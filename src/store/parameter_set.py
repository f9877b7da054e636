"""Immutable result mapping of one ingestion run."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from core.types import ParamRecord, SiteRegistry


class ParameterSet(Mapping[str, ParamRecord]):
    """Packaged parameters keyed by name, plus the run's fixed orderings."""

    def __init__(
        self,
        records: Mapping[str, ParamRecord],
        model_name: str,
        sites: SiteRegistry,
    ) -> None:
        self._records = dict(records)
        self._model_name = model_name
        self._sites = sites

    @property
    def components(self) -> tuple[str, ...]:
        """Component list every record is indexed by."""
        return self._sites.components

    @property
    def model_name(self) -> str:
        """Model label stored on every record."""
        return self._model_name

    @property
    def sites(self) -> SiteRegistry:
        """Association site ordering used by assoc records."""
        return self._sites

    def __getitem__(self, name: str) -> ParamRecord:
        try:
            return self._records[name]
        except KeyError:
            raise KeyError(
                f"Parameter '{name}' was not found for model {self._model_name}. "
                f"Available parameters: {sorted(self._records)}."
            ) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return (
            f"ParameterSet(model_name={self._model_name!r}, "
            f"components={self.components!r}, parameters={sorted(self._records)!r})"
        )
