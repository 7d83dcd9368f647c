"""RepoMirror Flask dashboard."""
