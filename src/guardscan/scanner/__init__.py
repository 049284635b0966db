"""Pattern scanning engine: rule catalogs, caches and domain scanners."""
