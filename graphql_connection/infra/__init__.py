"""Infrastructure shared by the pagination core (logging)."""
