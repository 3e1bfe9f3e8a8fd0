"""HTTP server for HiveRoute."""
