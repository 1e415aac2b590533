"""Infrastructure layer for the instrument detector.

Modules:
    metrics     Prometheus metrics registry (analyses, latency, load failures).
"""
