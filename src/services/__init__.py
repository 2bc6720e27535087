"""Application services composed from components."""
