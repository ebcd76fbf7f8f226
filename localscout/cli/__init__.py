# =============================================================================
# localscout/cli/__init__.py: CLI Module Overview
# =============================================================================
#
# Command-line tools for operators and developers working with localScout
# outside the HTTP API:
#
#   seed  Load a JSON directory export (businesses, offers, events and
#         optional knowledge documents) into the SQLite store and, when
#         semantic search is configured, into ChromaDB.
#   ask   Run discovery chat turns against a city, one-shot or as an
#         interactive session.
#
# Run with:  python -m localscout.cli <command> ...
# =============================================================================
