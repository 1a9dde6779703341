"""Return codes, wire message layouts and packet plugin chains for a D/TLS based VPN protocol."""

__version__ = "0.1.0"
__all__ = ["codes", "wire", "plugin", "stats"]