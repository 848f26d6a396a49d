"""Writers for generated stubs, definition files and fact tables."""
