"""Request pipeline: guard -> prompt -> generation -> response.

Every stage is plain Python with no HTTP types, so the FastAPI route and the
CLI runner share the same behavior. Failures are raised as `PipelineError`
subclasses that already carry the HTTP status and the user-facing reasoning.
"""
