"""City Manager API - paginated city directory backed by MongoDB."""
