from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label_key: str
    kind: str = "select"  # "select", "date" or "text"
    required: bool = True
    option_source: str | None = None  # server-fed candidates; None for free input


@dataclass(frozen=True)
class FormDefinition:
    """Ordered dependency chain: each field is locked until every field before it is filled."""

    name: str
    chain: tuple[FieldSpec, ...]
    success_route: str | None = None

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return self.chain

    def get(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def chain_index(self, name: str) -> int | None:
        for index, spec in enumerate(self.chain):
            if spec.name == name:
                return index
        return None

    def upstream_of(self, name: str) -> tuple[FieldSpec, ...]:
        index = self.chain_index(name)
        if index is None:
            return ()
        return self.chain[:index]

    def downstream_of(self, name: str) -> tuple[FieldSpec, ...]:
        index = self.chain_index(name)
        if index is None:
            return ()
        return self.chain[index + 1 :]
