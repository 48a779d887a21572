"""HTTP surface for the flight result pipeline."""
