"""HTTP surface for parcel sketches (in-memory store)."""
