"""Native tasks shipped with relay."""
