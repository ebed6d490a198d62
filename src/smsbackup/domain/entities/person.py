from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Address:
    # addr_spec is local-part@domain, display_name is already header-encoded
    addr_spec: str
    display_name: Optional[str] = None

    @property
    def local_part(self) -> str:
        return self.addr_spec.rpartition("@")[0]

    @property
    def domain(self) -> str:
        return self.addr_spec.rpartition("@")[2]

    def __str__(self) -> str:
        if self.display_name:
            return f"{self.display_name} <{self.addr_spec}>"
        return self.addr_spec


@dataclass(frozen=True)
class PersonRecord:
    external_id: str
    display_name: str
    address: Address
