"""Application layer - order sources and projections.

Structure:
- projections/: OrderListProjection (event fold over the order list)
- sources/: SSE-backed and polling-backed order sources, source selector
"""
