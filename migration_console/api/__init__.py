"""HTTP surface of the migration console."""
