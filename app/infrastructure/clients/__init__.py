"""Transport SDK client factories."""
