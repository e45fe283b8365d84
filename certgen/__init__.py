"""certgen - TLS certificate configuration for Cilium, Hubble and Clustermesh"""

__version__ = "0.1.0"
