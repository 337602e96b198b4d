"""HTTP API for taskhub."""
