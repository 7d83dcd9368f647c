"""
RepoMirror client core.

Modules
───────
models       — Pydantic wire models (AnalysisResult, HistoryRecord) + RequestState
errors       — Exception taxonomy raised at the network boundary
classifier   — Score → Tier classification
preferences  — SQLite-backed theme preference (load, save)
analysis     — AnalysisClient: analyze request lifecycle
history      — HistoryClient: best-effort scan-history snapshot
view         — ViewController: composition root (events in, ViewModel out)
"""
