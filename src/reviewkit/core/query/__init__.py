"""Generic list querying (search, filter, sort, paginate) and CSV export."""
