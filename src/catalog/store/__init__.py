"""Entity store access for the catalog."""
