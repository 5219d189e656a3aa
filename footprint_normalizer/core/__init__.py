"""Core utilities and shared infrastructure.

- config: Processing options, environment and request overrides
- constants: Named tuning constants and property names
- exceptions: Pipeline exception hierarchy
- ingress: Request body decoding and batch-level validation
"""
