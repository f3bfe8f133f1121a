"""Infrastructure Layer — the embedded store adapter and cross-cutting concerns.

Invariants:
    - Every store failure leaves this layer as a TrackerError
    - No HTTP types imported here
"""
