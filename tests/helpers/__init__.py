"""Test helper utilities."""

from tests.helpers.fake_gateway import FakeGateway, make_shipment

__all__ = [
    "FakeGateway",
    "make_shipment",
]
