"""Services: wallet accounting engine, event sources and remote wallet sync."""
