"""HTTP surface of the TEMPT API."""
