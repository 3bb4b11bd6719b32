"""Contract creation wizard engine: draft state, extraction merge, allocation costs and release schedules."""
