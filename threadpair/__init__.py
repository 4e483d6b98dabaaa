"""Pairing state, URI resource encoding and SRP lease tracking for Thread devices."""

__version__ = "0.1.0"
__all__ = ["common", "uri_resources", "pairing", "driver", "srp_lease"]