"""HTTP application for the catalog backend."""
