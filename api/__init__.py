"""HTTP surface for the booking engine."""
