"""Dashboard metrics over scored reviews."""
