"""Sequential IPv4 address allocation from a single network block."""

from __future__ import annotations

from ipaddress import IPv4Address, IPv4Network
from typing import List

from wsnsim.engine.base import AddressExhaustedError


class Ipv4AddressAllocator:
    """Hands out host addresses of ``block`` in increasing order.

    ``block`` accepts either prefix (``10.0.0.0/24``) or netmask
    (``10.0.0.0/255.255.255.0``) notation. The first address issued is the
    first host address of the network.
    """

    def __init__(self, block: str) -> None:
        self.network = IPv4Network(block, strict=True)
        self._hosts = self.network.hosts()
        self.issued: List[IPv4Address] = []

    def allocate(self) -> IPv4Address:
        try:
            address = next(self._hosts)
        except StopIteration:
            raise AddressExhaustedError(f"Address block {self.network} exhausted") from None
        self.issued.append(address)
        return address

    def allocate_many(self, count: int) -> List[IPv4Address]:
        return [self.allocate() for _ in range(count)]
