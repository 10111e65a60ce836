"""Small pure helpers shared by vendor adapters."""
