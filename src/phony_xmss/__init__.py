"""Synthetic Winternitz/XMSS key and signature material for benchmarking verifiers."""
