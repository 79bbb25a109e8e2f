"""Bundled SQL scripts, resolved as ``classpath:`` resources."""
