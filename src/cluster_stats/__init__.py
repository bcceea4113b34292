"""Cluster stats monitor - point-in-time health and usage snapshots of a cluster."""

__version__ = "1.0.0"
