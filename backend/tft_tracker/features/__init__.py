"""Feature modules: players, matches, notifications and the match tracker jobs."""
