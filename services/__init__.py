"""Account persistence and authentication flows."""
