"""The signed-in shopper as seen by the domain."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    id: str
    email: str = ""
    name: str = ""
