"""Bill parsing, normalization, merge/dedup, filtering, and session state."""
