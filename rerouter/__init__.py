"""Host-alias rewriting middleware for reverse proxy chains."""
