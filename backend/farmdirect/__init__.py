"""FarmDirect messaging backend."""
