"""HTTP API for the ClamCard system."""
