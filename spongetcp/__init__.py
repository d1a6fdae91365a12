"""User-space TCP building blocks: byte streams, reassembly, a TCP receiver and IPv4/TCP wire formats."""

__version__ = "0.1.0"