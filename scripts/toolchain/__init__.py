"""External tool invocation and path layout."""
