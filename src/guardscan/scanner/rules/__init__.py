"""Static rule catalogs, one module per analysis domain."""
