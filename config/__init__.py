"""RepoMirror configuration."""
