"""Library layer: everything below the CLI."""
