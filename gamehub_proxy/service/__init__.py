"""Request mediation: token resolution, rewriting, collaborator clients."""
