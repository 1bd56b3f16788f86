"""
Core Logic Layer.

Orchestrates media synchronization for content items and wires the
services for a site build.
"""
