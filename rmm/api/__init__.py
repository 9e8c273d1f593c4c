"""HTTP service exposing the quoter."""
