"""
Third-party recipe adapter.

Responsibilities:
- Hold the upstream endpoint configuration.
- Fetch the upstream recipe list over HTTP.
- Remap upstream field names onto the local recipe shape.
"""
