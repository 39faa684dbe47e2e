"""Domain types shared by operations and tools."""
